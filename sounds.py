"""
Ambient sounds: catalog filtering and the hidden video-player state.
"""
from typing import Any, Dict, List, Optional

import local_database as local_db
from models import SoundTrack

EMBED_URL = "https://www.youtube.com/embed/{video_id}"
# 1x1 "stealth" player: audio only, no controls, no fullscreen
PLAYER_VARS = {"playsinline": 1, "controls": 0, "disablekb": 1, "fs": 0, "enablejsapi": 1}


def list_tracks(category: str = "all") -> List[SoundTrack]:
    if category == "all":
        return list(local_db.SOUND_TRACKS)
    return [t for t in local_db.SOUND_TRACKS if t.category == category]


def get_track(track_id: str) -> Optional[SoundTrack]:
    return next((t for t in local_db.SOUND_TRACKS if t.id == track_id), None)


def valid_category(category: str) -> bool:
    return any(c["id"] == category for c in local_db.SOUND_CATEGORIES)


class SoundPlayer:
    """Mirrors the embedded player: which track is loaded and whether it plays."""

    def __init__(self):
        self.current: Optional[SoundTrack] = None
        self.is_playing = False

    def toggle(self, track: SoundTrack) -> None:
        # Same track flips play/pause; a different one is loaded and played
        if self.current is not None and self.current.id == track.id:
            self.is_playing = not self.is_playing
        else:
            self.current = track
            self.is_playing = True

    def pause(self) -> None:
        self.is_playing = False

    def resume(self) -> None:
        if self.current is not None:
            self.is_playing = True

    def to_dict(self) -> Dict[str, Any]:
        player = None
        if self.current is not None:
            player = {
                "video_id": self.current.video_id,
                "embed_url": EMBED_URL.format(video_id=self.current.video_id),
                "width": 1,
                "height": 1,
                "player_vars": PLAYER_VARS,
                "command": "play" if self.is_playing else "pause",
            }
        return {
            "current": self.current.to_dict() if self.current else None,
            "is_playing": self.is_playing,
            "player": player,
        }
