"""Jukebox remote control.

The jukebox plays music on the server's own audio output. Every call goes
through the ``jukeboxControl`` operation and fails with
SubsonicAuthorizationError unless the user has the jukebox role.
"""

import logging
from typing import Iterable, Optional

from .client import SubsonicClient
from .models import JukeboxPlaylist, JukeboxStatus
from .query import Query

logger = logging.getLogger(__name__)

OPERATION = "jukeboxControl"


class Jukebox:
    """A wrapper on a SubsonicClient controlling only the jukebox.

    Example:
        >>> jukebox = Jukebox(client)
        >>> jukebox.add("300", "301")
        >>> status = jukebox.play()
        >>> status.playing
        True
    """

    def __init__(self, client: SubsonicClient):
        self.client = client

    def _send(
        self,
        action: str,
        index: Optional[int] = None,
        ids: Optional[Iterable[str]] = None,
    ) -> JukeboxStatus:
        args = Query.with_arg("action", action).arg("index", index).arg_list("id", ids)
        logger.debug(f"Jukebox action: {action}")
        return JukeboxStatus.from_dict(self.client.get(OPERATION, args))

    def playlist(self) -> JukeboxPlaylist:
        """Return the jukebox playlist together with its status."""
        data = self.client.get(OPERATION, Query.with_arg("action", "get"))
        return JukeboxPlaylist.from_dict(data)

    def status(self) -> JukeboxStatus:
        return self._send("status")

    def play(self) -> JukeboxStatus:
        return self._send("start")

    def stop(self) -> JukeboxStatus:
        return self._send("stop")

    def skip_to(self, index: int) -> JukeboxStatus:
        """Jump to the song at index (zero-based) in the playlist.

        An index past the end plays the last song.
        """
        return self._send("skip", index=index)

    def add(self, *song_ids: str) -> JukeboxStatus:
        """Append songs to the playlist, in the order given."""
        return self._send("add", ids=song_ids)

    def set(self, *song_ids: str) -> JukeboxStatus:
        """Replace the playlist with the given songs."""
        return self._send("set", ids=song_ids)

    def clear(self) -> JukeboxStatus:
        return self._send("clear")

    def remove(self, index: int) -> JukeboxStatus:
        """Remove the song at index (zero-based) from the playlist."""
        return self._send("remove", index=index)

    def shuffle(self) -> JukeboxStatus:
        return self._send("shuffle")

    def set_volume(self, gain: float) -> JukeboxStatus:
        """Set playback volume; values above 1.0 have no effect."""
        args = Query.with_arg("action", "setGain").arg("gain", gain)
        return JukeboxStatus.from_dict(self.client.get(OPERATION, args))
