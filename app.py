import base64
import binascii
import datetime
import logging
import threading
import time
import uuid
from typing import Dict, List, Optional

from flask import Flask, Response, jsonify, request, session, stream_with_context

import config
import database as db
import local_database as local_db
import pregnancy
import sounds
from audio_clip import ClipError, inspect_clip
from comfort import ComfortPhraseScheduler
from gemini_service import GeminiService
from location import BROWSER_ERROR_CODES, ClientPositionSource, LocationErrorKind, LocationProvider
from models import AppView, Coordinate, SpecialistType
from navigation import NavigationRefused, NavigationViewController
from places import SOS_QUERY, PlaceSearchClient
from speech import ClientSpeechEngine, SpeechAnnouncer
from timers import EVENT_LOCK, ThreadingScheduler

logger = logging.getLogger("mamaezen")

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_BYTES

# --- AI ---
gemini = GeminiService()
places_client = PlaceSearchClient(gemini)
scheduler = ThreadingScheduler(EVENT_LOCK)

MAX_CHAT_TURNS = 20


# --- PER-CLIENT STATE ---
class ClientState:
    """Everything one browser owns: its GPS, its voice, its player, its chats."""

    def __init__(self):
        self.position_source = ClientPositionSource()
        self.speech_engine = ClientSpeechEngine()
        announcer = SpeechAnnouncer(self.speech_engine)
        self.navigation = NavigationViewController(
            provider=LocationProvider(self.position_source),
            search_client=places_client,
            announcer=announcer,
            comfort=ComfortPhraseScheduler(announcer, scheduler),
            scheduler=scheduler,
        )
        self.player = sounds.SoundPlayer()
        self.chat_history: Dict[SpecialistType, List[dict]] = {}
        self.chat_lock = threading.Lock()
        self.last_seen = time.monotonic()

    def release(self):
        """Stop everything still running for a browser that went away."""
        with EVENT_LOCK:
            self.navigation.teardown()
        self.player.pause()


_clients: Dict[str, ClientState] = {}
_clients_lock = threading.Lock()


def current_client_id() -> str:
    if 'client_id' not in session:
        session['client_id'] = uuid.uuid4().hex
    return session['client_id']


def evict_idle_clients(now: Optional[float] = None,
                       ttl_s: float = config.CLIENT_IDLE_TTL_S) -> int:
    now = time.monotonic() if now is None else now
    with _clients_lock:
        idle = [cid for cid, state in _clients.items() if now - state.last_seen > ttl_s]
        evicted = [_clients.pop(cid) for cid in idle]
    # Released outside _clients_lock: teardown takes EVENT_LOCK
    for state in evicted:
        state.release()
    if evicted:
        logger.info("Released %d idle client(s)", len(evicted))
    return len(evicted)


def current_client() -> ClientState:
    cid = current_client_id()
    evict_idle_clients()
    with _clients_lock:
        state = _clients.get(cid)
        if state is None:
            state = _clients[cid] = ClientState()
        state.last_seen = time.monotonic()
        return state


def parse_specialist(value: str):
    try:
        return SpecialistType(value.lower())
    except ValueError:
        return None


def navigation_payload(state: ClientState) -> dict:
    payload = state.navigation.snapshot()
    payload["utterance"] = state.speech_engine.to_dict()
    return payload


# --- ROUTES ---

@app.route('/')
def dashboard():
    return jsonify({
        "greeting": "Olá, Mamãe",
        "views": [v.value for v in AppView],
        "specialists": [s.value for s in SpecialistType],
        "tip": local_db.DAILY_TIP,
        "ai_configured": gemini.configured,
    })


@app.route('/api/cry', methods=['POST'])
def cry():
    if 'audio' in request.files:
        f = request.files['audio']
        if f.filename == '':
            return jsonify({"error": "No selected file"}), 400
        audio_bytes = f.read()
        mime_type = f.mimetype or "audio/webm"
    else:
        data = request.get_json(silent=True) or {}
        if not data.get('audio_base64'):
            return jsonify({"error": "No audio provided"}), 400
        try:
            audio_bytes = base64.b64decode(data['audio_base64'], validate=True)
        except (binascii.Error, ValueError):
            return jsonify({"error": "audio_base64 is not valid base64"}), 400
        mime_type = data.get('mime_type', 'audio/webm')

    try:
        clip = inspect_clip(audio_bytes, mime_type)
    except ClipError as e:
        return jsonify({"error": str(e)}), 400

    outcome = gemini.analyze_cry(audio_bytes, mime_type)
    return jsonify({
        "result": outcome.value.to_dict(),
        "offline": outcome.fallback,
        "clip_seconds": round(clip.duration_s, 2),
    })


@app.route('/api/chat/<specialist>', methods=['POST'])
def chat(specialist):
    kind = parse_specialist(specialist)
    if kind is None:
        return jsonify({"error": f"Unknown specialist '{specialist}'"}), 404

    data = request.get_json(silent=True) or {}
    user_msg = (data.get('message') or '').strip()
    if not user_msg:
        return jsonify({"error": "Message is empty"}), 400

    state = current_client()
    with state.chat_lock:
        history = list(state.chat_history.get(kind, []))[-MAX_CHAT_TURNS:]

    def generate():
        reply = []
        for fragment in gemini.stream_specialist_reply(user_msg, history, kind):
            reply.append(fragment)
            yield fragment
        with state.chat_lock:
            turns = state.chat_history.setdefault(kind, [])
            turns.append({"role": "user", "text": user_msg})
            turns.append({"role": "model", "text": "".join(reply)})
            del turns[:-MAX_CHAT_TURNS]

    return Response(stream_with_context(generate()), mimetype='text/plain; charset=utf-8')


@app.route('/api/chat/<specialist>', methods=['GET', 'DELETE'])
def chat_history(specialist):
    kind = parse_specialist(specialist)
    if kind is None:
        return jsonify({"error": f"Unknown specialist '{specialist}'"}), 404
    state = current_client()
    with state.chat_lock:
        if request.method == 'DELETE':
            state.chat_history.pop(kind, None)
        return jsonify({"specialist": kind.value, "messages": state.chat_history.get(kind, [])})


@app.route('/api/recipes', methods=['POST'])
def recipes():
    data = request.get_json(silent=True) or {}
    query = (data.get('query') or '').strip()
    if not query:
        return jsonify({"error": "Tell us what you need (e.g. 'cólica', 'dormir')"}), 400
    outcome = gemini.generate_recipe(query)
    return jsonify({"recipe": outcome.value.to_dict(), "offline": outcome.fallback})


# --- MAPS / GUIDED NAVIGATION ---

@app.route('/api/navigation', methods=['GET'])
def navigation_state():
    state = current_client()
    with EVENT_LOCK:
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/location', methods=['POST'])
def navigation_location():
    """Browser geolocation results: a fix, an error code, or a permission re-grant."""
    data = request.get_json(silent=True) or {}
    state = current_client()
    source = state.position_source

    if data.get('event') == 'granted':
        with EVENT_LOCK:
            state.navigation.permission_granted()
            return jsonify(navigation_payload(state))

    if 'error' in data:
        err = data['error']
        if err == 'unsupported':
            kind = LocationErrorKind.UNSUPPORTED
        else:
            try:
                kind = BROWSER_ERROR_CODES[int(err)]
            except (KeyError, TypeError, ValueError):
                return jsonify({"error": f"Unknown geolocation error '{err}'"}), 400
        with EVENT_LOCK:
            source.push_error(kind)
            state.navigation.locate()
            return jsonify(navigation_payload(state))

    try:
        coordinate = Coordinate(float(data['latitude']), float(data['longitude']))
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "latitude and longitude are required"}), 400
    if not (-90 <= coordinate.latitude <= 90 and -180 <= coordinate.longitude <= 180):
        return jsonify({"error": "Coordinate out of range"}), 400

    with EVENT_LOCK:
        source.push_fix(coordinate)
        if not state.navigation.provider.watching:
            state.navigation.locate()
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/search', methods=['POST'])
def navigation_search():
    data = request.get_json(silent=True) or {}
    query = data.get('query') or ''
    state = current_client()
    nav = state.navigation

    try:
        with EVENT_LOCK:
            origin = nav.begin_search(query)
    except NavigationRefused as e:
        return jsonify({"error": str(e)}), 409
    if origin is None:
        return jsonify({"places": [], "message": "Digite o que você procura."})

    # The remote search runs outside the event lock so timers keep ticking
    results = places_client.search(query, origin)
    with EVENT_LOCK:
        nav.complete_search(query, results)
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/sos', methods=['POST'])
def navigation_sos():
    state = current_client()
    nav = state.navigation
    try:
        with EVENT_LOCK:
            origin = nav.begin_search(SOS_QUERY, use_current=True)
    except NavigationRefused as e:
        return jsonify({"error": str(e)}), 409

    results = places_client.sos(origin)
    with EVENT_LOCK:
        nav.complete_search(SOS_QUERY, results)
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/select', methods=['POST'])
def navigation_select():
    data = request.get_json(silent=True) or {}
    state = current_client()
    nav = state.navigation
    with EVENT_LOCK:
        place = nav.find_place(str(data.get('place_id', '')))
        if place is None:
            return jsonify({"error": "Place not in the current results"}), 404
        try:
            nav.select_place(place)
        except NavigationRefused as e:
            return jsonify({"error": str(e), "alert": True}), 409
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/exit', methods=['POST'])
def navigation_exit():
    state = current_client()
    with EVENT_LOCK:
        state.navigation.exit_navigation()
        return jsonify(navigation_payload(state))


@app.route('/api/navigation/notice/dismiss', methods=['POST'])
def navigation_dismiss_notice():
    state = current_client()
    with EVENT_LOCK:
        state.navigation.dismiss_notice()
        return jsonify(navigation_payload(state))


# --- SOUNDS ---

@app.route('/api/sounds', methods=['GET'])
def sound_list():
    category = request.args.get('category', 'all')
    if not sounds.valid_category(category):
        return jsonify({"error": f"Unknown category '{category}'"}), 400
    state = current_client()
    return jsonify({
        "categories": local_db.SOUND_CATEGORIES,
        "tracks": [t.to_dict() for t in sounds.list_tracks(category)],
        "player": state.player.to_dict(),
    })


@app.route('/api/sounds/<track_id>/toggle', methods=['POST'])
def sound_toggle(track_id):
    track = sounds.get_track(track_id)
    if track is None:
        return jsonify({"error": "Track not found"}), 404
    state = current_client()
    state.player.toggle(track)
    return jsonify({"player": state.player.to_dict()})


@app.route('/api/sounds/pause', methods=['POST'])
def sound_pause():
    state = current_client()
    state.player.pause()
    return jsonify({"player": state.player.to_dict()})


@app.route('/api/sounds/resume', methods=['POST'])
def sound_resume():
    state = current_client()
    if state.player.current is None:
        return jsonify({"error": "No track loaded"}), 409
    state.player.resume()
    return jsonify({"player": state.player.to_dict()})


# --- PREGNANCY TRACKER ---

@app.route('/api/pregnancy', methods=['GET', 'POST'])
def pregnancy_tracker():
    cid = current_client_id()

    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        lmp = (data.get('lmp') or '').strip()
        try:
            lmp_date = pregnancy.parse_date(lmp)
        except ValueError:
            return jsonify({"error": "lmp must be a date in YYYY-MM-DD format"}), 400
        if lmp_date > datetime.date.today():
            return jsonify({"error": "lmp cannot be in the future"}), 400
        saved = db.save_pregnancy_start(cid, lmp)
        summary = pregnancy.tracker_summary(lmp)
        summary["setup_completed"] = True
        summary["saved"] = saved
        return jsonify(summary)

    lmp = db.get_pregnancy_start(cid)
    if not lmp:
        return jsonify({"setup_completed": False})
    summary = pregnancy.tracker_summary(lmp)
    summary["setup_completed"] = True
    return jsonify(summary)


@app.route('/api/pregnancy/weeks/<int:week>', methods=['GET'])
def pregnancy_week(week):
    if not (pregnancy.MIN_WEEK <= week <= pregnancy.MAX_WEEK):
        return jsonify({"error": f"Week must be between {pregnancy.MIN_WEEK} and {pregnancy.MAX_WEEK}"}), 404
    return jsonify(pregnancy.week_summary(week))


if __name__ == '__main__':
    config.setup_logging()
    db.init_db()
    app.run(debug=False, threaded=True)
