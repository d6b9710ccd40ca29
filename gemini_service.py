"""
Gemini calls behind every AI screen. Each call has a static substitute.
"""
import json
import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, TypedDict

import google.generativeai as genai

import config
import local_database as local_db
from models import Coordinate, CryAnalysisResult, Outcome, Place, Recipe, SpecialistType

logger = logging.getLogger(__name__)


class CrySchema(TypedDict):
    category: str
    probability: float
    advice: str
    emotionalTone: str


class RecipeSchema(TypedDict):
    title: str
    description: str
    ingredients: List[str]
    instructions: List[str]
    benefits: str


CRY_PROMPT = """
Você é uma IA especialista em desenvolvimento infantil e análise de choro de bebês.
Analise este áudio e identifique a causa mais provável do choro entre: FOME, DOR, FRALDA, SONO, ou INCÔMODO/TÉDIO.

Retorne APENAS um JSON com este formato:
{
  "category": "Motivo (ex: Fome)",
  "probability": número de 0 a 100,
  "advice": "Uma frase curta e acolhedora com a solução prática.",
  "emotionalTone": "Uma palavra sobre o estado emocional (ex: Estressado, Cansado)"
}
"""

RECIPE_PROMPT = """
Crie uma receita ou sugestão alimentar para: "{query}".
Considere o contexto de maternidade/bebês/família.

Retorne JSON:
{{
  "title": "Nome do Prato/Bebida",
  "description": "Breve descrição atraente",
  "ingredients": ["item 1", "item 2"],
  "instructions": ["passo 1", "passo 2"],
  "benefits": "Por que isso ajuda na solicitação"
}}
"""

PLACES_PROMPT = """
Find the closest and most relevant places for "{query}" near latitude {lat}, longitude {lng}.
Prioritize emergency services if the query mentions 'Hospital' or 'Emergency'.

Return a JSON array of the top {limit} results.
Structure:
{{
  "id": "unique_id",
  "name": "Place Name",
  "address": "Full Address",
  "rating": 4.5,
  "isOpen": true,
  "distance": "Estimated distance (e.g. 2.5 km)",
  "lat": {lat},
  "lng": {lng},
  "type": "hospital | pharmacy | park | store"
}}
IMPORTANT: Return ONLY the JSON array string. No markdown.
"""

SPECIALIST_INSTRUCTIONS: Dict[SpecialistType, str] = {
    SpecialistType.NUTRITIONIST: (
        "Você é uma Nutricionista Pediátrica especialista em introdução alimentar e nutrição "
        "infantil. Seja gentil, use emojis, e dê dicas práticas e saudáveis."
    ),
    SpecialistType.PSYCHOLOGIST: (
        "Você é uma Psicóloga Perinatal especialista em maternidade. Seu foco é a saúde mental "
        "da mãe. Seja acolhedora, valide os sentimentos, ofereça escuta ativa e técnicas de "
        "redução de ansiedade."
    ),
    SpecialistType.PEDIATRICIAN: (
        "Você é uma Pediatra experiente. Ajude com triagem de sintomas, marcos de "
        "desenvolvimento e vacinas. IMPORTANTE: Para casos graves ou emergências, SEMPRE "
        "recomende ir ao pronto-socorro imediatamente. Nunca substitua uma consulta presencial."
    ),
}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def with_fallback(label: str, call: Callable[[], object], fallback: Callable[[], object]) -> Outcome:
    """Run a remote call; any exception becomes the static substitute."""
    try:
        return Outcome(value=call())
    except Exception as e:
        logger.warning("%s failed, using offline data: %s", label, e)
        return Outcome(value=fallback(), fallback=True, reason=str(e))


class GeminiService:
    def __init__(self, api_key: Optional[str] = None, model_name: str = config.GEMINI_MODEL):
        self.model_name = model_name
        self.api_key = config.GEMINI_API_KEY if api_key is None else api_key
        if self.api_key:
            genai.configure(api_key=self.api_key)
        else:
            logger.warning("No GEMINI_API_KEY configured; AI screens will serve offline data.")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _model(self, system_instruction: Optional[str] = None):
        if not self.api_key:
            raise RuntimeError("Gemini API key missing")
        if system_instruction:
            return genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        return genai.GenerativeModel(self.model_name)

    def _generate_json(self, contents, schema=None):
        generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )
        response = self._model().generate_content(contents, generation_config=generation_config)
        return json.loads(strip_code_fences(response.text) or "{}")

    # --- Cry Analysis ---
    def analyze_cry(self, audio_bytes: bytes, mime_type: str) -> Outcome:
        def call() -> CryAnalysisResult:
            data = self._generate_json(
                [{"mime_type": mime_type, "data": audio_bytes}, CRY_PROMPT],
                schema=CrySchema,
            )
            return CryAnalysisResult(
                category=str(data["category"]),
                probability=max(0.0, min(100.0, float(data["probability"]))),
                advice=str(data["advice"]),
                emotional_tone=str(data.get("emotionalTone", "")),
            )

        return with_fallback("Cry analysis", call, lambda: local_db.CRY_FALLBACK)

    # --- Specialist Chat ---
    def stream_specialist_reply(self, message: str, history: List[dict],
                                specialist: SpecialistType) -> Iterator[str]:
        """
        Yield the specialist's reply in fragments.

        `history` is a list of {"role": "user"|"model", "text": ...}. If the call
        fails before anything was produced, the offline reply is yielded instead.
        """
        produced = False
        try:
            model = self._model(SPECIALIST_INSTRUCTIONS[specialist])
            chat = model.start_chat(history=[
                {"role": h["role"], "parts": [h["text"]]} for h in history
            ])
            for chunk in chat.send_message(message, stream=True):
                text = chunk.text
                if text:
                    produced = True
                    yield text
        except Exception as e:
            logger.warning("Specialist chat (%s) failed: %s", specialist.value, e)
            if not produced:
                yield local_db.CHAT_FALLBACK

    # --- Recipe Generator ---
    def generate_recipe(self, query: str) -> Outcome:
        local = lookup_local_recipe(query)
        if local is not None:
            return Outcome(value=local)

        def call() -> Recipe:
            data = self._generate_json(RECIPE_PROMPT.format(query=query), schema=RecipeSchema)
            return Recipe(
                title=str(data["title"]),
                description=str(data.get("description", "")),
                ingredients=[str(i) for i in data.get("ingredients", [])],
                instructions=[str(s) for s in data.get("instructions", [])],
                benefits=str(data.get("benefits", "")),
            )

        return with_fallback("Recipe generation", call, lambda: local_db.RECIPES["colica"])

    # --- Maps Finder ---
    def find_nearby_places(self, query: str, origin: Coordinate,
                           limit: int = config.MAX_PLACE_RESULTS) -> Outcome:
        def call() -> List[Place]:
            prompt = PLACES_PROMPT.format(query=query, lat=origin.latitude,
                                          lng=origin.longitude, limit=limit)
            response = self._model().generate_content(prompt)
            data = json.loads(strip_code_fences(response.text) or "[]")
            if not isinstance(data, list):
                raise ValueError("Expected a JSON array of places")

            places = []
            for item in data:
                try:
                    places.append(Place.from_dict(item))
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    logger.debug("Skipping malformed place %r: %s", item, e)
            if not places:
                raise ValueError("Empty results")
            return places[:limit]

        return with_fallback("Maps search", call, local_db.fallback_places)


def lookup_local_recipe(query: str) -> Optional[Recipe]:
    lower = query.lower()
    for keywords, key in local_db.RECIPE_KEYWORDS:
        if any(k in lower for k in keywords):
            return local_db.RECIPES[key]
    return None
