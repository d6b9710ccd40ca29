from speech import ClientSpeechEngine, SpeechAnnouncer, sanitize_tts_text


def test_say_cancels_before_every_utterance(speech_engine):
    announcer = SpeechAnnouncer(speech_engine)
    announcer.say("Primeira frase")
    announcer.say("Segunda frase", rate=0.9)

    kinds = [kind for kind, _ in speech_engine.events]
    assert kinds == ["cancel", "speak", "cancel", "speak"]
    assert speech_engine.current.text == "Segunda frase"
    assert speech_engine.current.rate == 0.9


def test_rapid_triggers_leave_a_single_utterance():
    engine = ClientSpeechEngine()
    announcer = SpeechAnnouncer(engine)
    for i in range(10):
        announcer.say(f"frase {i}")

    current = engine.to_dict()
    assert current["text"] == "frase 9"
    assert current["seq"] == 10
    assert current["lang"] == "pt-BR"


def test_cancel_all_silences_engine():
    engine = ClientSpeechEngine()
    announcer = SpeechAnnouncer(engine)
    announcer.say("Olá")
    announcer.cancel_all()
    assert engine.to_dict() is None


def test_blank_text_is_not_spoken(speech_engine):
    announcer = SpeechAnnouncer(speech_engine)
    assert announcer.say("   \n ") is None
    assert speech_engine.events == []


def test_sanitize_tts_text():
    assert sanitize_tts_text("Olá\x00mundo") == "Olá mundo"
    assert len(sanitize_tts_text("a" * 800)) == 500


def test_estimate_duration_tracks_length_and_rate():
    short = SpeechAnnouncer.estimate_duration("Calma pais.")
    longer = SpeechAnnouncer.estimate_duration("Calma pais. " * 10)
    slower = SpeechAnnouncer.estimate_duration("Calma pais. " * 10, rate=0.5)

    assert 0 < short < longer < slower
    assert SpeechAnnouncer.estimate_duration("") == 0.0
