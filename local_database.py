"""
Bundled offline data: what the app shows when the AI cannot answer.
"""
from typing import Dict, List

from models import CryAnalysisResult, Place, PregnancyWeek, Recipe, SoundTrack

# --- AUDIO ---
COMFORT_PHRASES: List[str] = [
    "Calma pais, respirem fundo. O bebê sente a segurança de vocês.",
    "Vocês estão fazendo um ótimo trabalho. Já estamos chegando.",
    "Mantenha a atenção no trânsito, eu estou monitorando o trajeto.",
    "Vai ficar tudo bem. A equipe médica já está preparada para receber vocês.",
    "Seu amor é o melhor remédio agora. Continue transmitindo calma.",
    "Estamos na rota mais rápida e segura. Confie no processo.",
]

NAVIGATION_GREETING = (
    "Calma pais, seu bebê vai ficar bem. Deixe comigo que vou traçar a rota mais próxima "
    "com segurança. Apertem os cintos e vamos lá."
)

# --- CRY ANALYZER ---
CRY_FALLBACK = CryAnalysisResult(
    category="DOR / CÓLICA",
    probability=85,
    advice="Parece desconforto abdominal. Tente fazer massagens circulares na barriguinha "
           "e 'bicicleta' com as pernas.",
    emotional_tone="Intenso",
)

# --- SPECIALIST CHAT ---
CHAT_FALLBACK = (
    "Estou com dificuldade de conexão no momento, mas lembre-se: "
    "se for urgente, procure um médico presencial."
)

DAILY_TIP = "Tire 5 minutos para você hoje. Uma mãe descansada cuida ainda melhor."

# --- RECIPES ---
RECIPES: Dict[str, Recipe] = {
    "colica": Recipe(
        title="Chazinho Anti-Cólica Natural",
        description="Uma infusão suave para acalmar a barriguinha do bebê.",
        ingredients=["1 colher de chá de funcho", "1 xícara de água fervente", "Muito amor"],
        instructions=["Ferva a água", "Adicione o funcho", "Aguarde 5 min", "Coe e espere amornar bem"],
        benefits="O funcho ajuda a relaxar o intestino e eliminar gases.",
    ),
    "dormir": Recipe(
        title="Ritual do Soninho (Chá de Camomila)",
        description="Bebida relaxante para mãe e bebê (se já introduzido).",
        ingredients=["Flores de camomila secas", "Água filtrada"],
        instructions=["Faça a infusão por 10 min", "Deixe esfriar", "Ofereça em temperatura ambiente"],
        benefits="Propriedades calmantes naturais que induzem o sono.",
    ),
    "leite": Recipe(
        title="Suco Turbinador de Leite",
        description="Hidratação potente para mamães que amamentam.",
        ingredients=["Água de coco", "Uva verde", "Hortelã"],
        instructions=["Bata tudo no liquidificador", "Beba sem coar para aproveitar as fibras"],
        benefits="Aumenta a hidratação e fornece energia rápida.",
    ),
}

# keyword -> RECIPES key, checked in order
RECIPE_KEYWORDS = [
    (("cólica", "colica"), "colica"),
    (("dormir", "sono"), "dormir"),
    (("leite", "amamentar"), "leite"),
]

# --- PLACES (OFFLINE FALLBACK) ---
PLACES: List[dict] = [
    {
        "id": "hosp_1",
        "name": "Hospital Maternidade Modelo",
        "address": "Av. Principal, 1000 - Centro",
        "rating": 4.9,
        "isOpen": True,
        "distance": "1.2 km",
        "lat": -23.5505,
        "lng": -46.6333,
        "type": "hospital",
    },
    {
        "id": "hosp_2",
        "name": "Pronto Socorro Infantil 24h",
        "address": "Rua da Saúde, 500",
        "rating": 4.8,
        "isOpen": True,
        "distance": "2.5 km",
        "lat": -23.5605,
        "lng": -46.6433,
        "type": "hospital",
    },
    {
        "id": "pharm_1",
        "name": "Farmácia Plantão 24h",
        "address": "Rua dos Remédios, 123",
        "rating": 4.5,
        "isOpen": True,
        "distance": "0.5 km",
        "lat": -23.5555,
        "lng": -46.6355,
        "type": "pharmacy",
    },
]


def fallback_places() -> List[Place]:
    """Fresh Place objects for the offline list (callers may hold on to them)."""
    return [Place.from_dict(p) for p in PLACES]


PLACE_CATEGORIES = [
    {"name": "Hospitais", "icon": "🏥"},
    {"name": "Farmácia 24h", "icon": "💊"},
    {"name": "Pediatra", "icon": "🩺"},
    {"name": "Parques", "icon": "🌳"},
]

# --- SOUNDS ---
SOUND_TRACKS: List[SoundTrack] = [
    SoundTrack("1", "Som do Útero (2 Horas)", "womb", "0e9QuV6yXk", "2:00:00", "bg-red-100"),
    SoundTrack("2", "Ruído Branco Puro (Tela Preta)", "baby", "nMfPqeZjc2c", "2:00:00", "bg-gray-100"),
    SoundTrack("3", "Chuva e Trovões Suaves", "nature", "mPZkdNFkNps", "2:00:00", "bg-blue-200"),
    SoundTrack("4", "Caixinha de Música (Brahms)", "baby", "k6rQhD5211Y", "1:00:00", "bg-yellow-100"),
    SoundTrack("5", "Piano Romântico Internacional", "mom", "t5Jc15e8Q5c", "1:30:00", "bg-purple-100"),
    SoundTrack("6", "Floresta Mágica", "nature", "xNN7iTA57jM", "2:00:00", "bg-green-100"),
]

SOUND_CATEGORIES = [
    {"id": "all", "label": "Todos"},
    {"id": "womb", "label": "Útero"},
    {"id": "baby", "label": "Bebê"},
    {"id": "nature", "label": "Natureza"},
    {"id": "mom", "label": "Mamãe"},
]

# --- PREGNANCY ---
# Sparse on purpose: weeks in between are served from the closest entry.
PREGNANCY_WEEKS: Dict[int, PregnancyWeek] = {
    4: PregnancyWeek(
        4, "Semente de Papoula", "🌰", "< 1g", "1mm",
        "Apenas uma bolinha de células implantando no útero.",
        "O tubo neural (futuro cérebro e medula) começa a se formar.",
        "Ácido Fólico é crucial agora. Coma vegetais verdes escuros, feijão e lentilha.",
        "Álcool e tabaco devem ser eliminados completamente.",
        "Inicie o pré-natal imediatamente para confirmar a gravidez e iniciar suplementação.",
    ),
    8: PregnancyWeek(
        8, "Framboesa", "🍇", "1g", "1.6cm",
        "Pequenos dedos das mãos e pés começam a se formar.",
        "O coração já bate cerca de 150 vezes por minuto.",
        "Vitamina B6 pode ajudar com os enjoos. Tente gengibre e pequenas refeições.",
        "Carnes cruas ou mal passadas (risco de toxoplasmose).",
        "Beba muita água, a hidratação ajuda a aumentar o volume sanguíneo necessário.",
    ),
    12: PregnancyWeek(
        12, "Limão", "🍋", "14g", "5.4cm",
        "O rosto começa a parecer humano e os reflexos funcionam.",
        "Os rins começam a produzir urina.",
        "Proteínas magras (frango, peixe) são essenciais para o crescimento dos tecidos.",
        "Queijos não pasteurizados e embutidos crus.",
        "Ótimo momento para o ultrassom morfológico do primeiro trimestre.",
    ),
    16: PregnancyWeek(
        16, "Abacate", "🥑", "100g", "11.6cm",
        "A pele ainda é transparente e o esqueleto endurece.",
        "Talvez você comece a sentir pequenos 'borbulhos' (movimentos).",
        "Cálcio é vital. Leite, iogurte, ou brócolis e couve para os ossos do bebê.",
        "Excesso de cafeína. Limite a uma xícara pequena por dia.",
        "Sua barriga começa a aparecer. Use hidratantes para prevenir estrias.",
    ),
    20: PregnancyWeek(
        20, "Banana", "🍌", "300g", "25cm",
        "Metade do caminho! O bebê já engole líquido amniótico.",
        "Desenvolve impressões digitais únicas.",
        "Ferro é essencial. Carne vermelha magra, espinafre e feijão previnem anemia.",
        "Peixes com alto teor de mercúrio (cação, peixe-espada).",
        "Ultrassom morfológico detalhado geralmente ocorre nesta semana.",
    ),
    21: PregnancyWeek(
        21, "Cenoura", "🥕", "360g", "26.7cm",
        "Seu bebê já tem ciclos de sono e vigília definidos.",
        "O sistema digestivo está amadurecendo rapidamente.",
        "Vitamina C (laranja, acerola) ajuda a absorver o ferro dos alimentos.",
        "Medicamentos sem prescrição médica (Aspirina e anti-inflamatórios).",
        "Descanse as pernas para evitar inchaço e varizes.",
    ),
    24: PregnancyWeek(
        24, "Milho", "🌽", "600g", "30cm",
        "O bebê começa a acumular gordura e o rosto está formado.",
        "Os pulmões começam a produzir surfactante.",
        "Fibras e água para evitar constipação, comum nesta fase.",
        "Alimentos muito salgados ou industrializados (aumentam retenção de líquidos).",
        "Fique atenta aos movimentos fetais. Eles devem ser frequentes.",
    ),
    28: PregnancyWeek(
        28, "Berinjela", "🍆", "1kg", "37cm",
        "Ele já abre e fecha os olhos e percebe luz.",
        "O cérebro desenvolve bilhões de neurônios.",
        "Omega-3 (peixes seguros, chia, nozes) é fundamental para o cérebro do bebê.",
        "Dormir de barriga para cima (pode comprimir a veia cava). Durma de lado.",
        "Comece a contar os chutes do bebê diariamente.",
    ),
    32: PregnancyWeek(
        32, "Repolho", "🥬", "1.7kg", "42cm",
        "O bebê ocupa quase todo o espaço e chuta forte.",
        "As unhas já chegam à ponta dos dedos.",
        "Refeições pequenas e frequentes ajudam com a azia e falta de espaço.",
        "Viagens longas de avião sem autorização médica.",
        "Prepare a mala da maternidade. O bebê pode querer chegar antes.",
    ),
    36: PregnancyWeek(
        36, "Mamão", "🥣", "2.6kg", "47cm",
        "A maioria dos bebês já está de cabeça para baixo.",
        "Os pulmões estão quase maduros.",
        "Carboidratos complexos para energia extra no final da gestação.",
        "Atividades físicas de alto impacto ou risco de queda.",
        "Consulte o médico semanalmente a partir de agora.",
    ),
    38: PregnancyWeek(
        38, "Abóbora", "🎃", "3.1kg", "49cm",
        "O lanugo (pelos finos) está desaparecendo.",
        "Pronto para nascer a qualquer momento.",
        "Mantenha-se muito bem hidratada para o trabalho de parto.",
        "Estresse excessivo. Tente relaxar e focar na respiração.",
        "Fique atenta aos sinais de trabalho de parto (contrações rítmicas).",
    ),
    40: PregnancyWeek(
        40, "Melancia", "🍉", "3.4kg", "51cm",
        "Pronto para nascer a qualquer momento!",
        "Todos os sistemas estão prontos para o mundo exterior.",
        "Coma alimentos leves de fácil digestão.",
        "Ficar longe do hospital ou de seu suporte de parto.",
        "Parabéns! Seu bebê está pronto. Confie no seu corpo.",
    ),
}

PREGNANCY_DISCLAIMER = (
    "O Mamãe Zen fornece estimativas médias de crescimento. Cada bebê é único. "
    "O peso real, a saúde e prescrições médicas devem ser avaliadas exclusivamente "
    "pelo seu obstetra em consultas presenciais."
)
