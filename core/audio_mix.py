"""
Audio Mix - Per-track mix parameters

Every audio layer owns exactly one audio track, so mix parameters can be
keyed by track id without ambiguity. The mixer applies them; this module
only builds the table.
"""

from typing import Dict, List

from models.composition import AudioMixInput, LayerPlacement


def build_audio_mix(
    audio_placements: List[LayerPlacement],
    audio_track_ids: Dict[str, int],
) -> List[AudioMixInput]:
    """
    Build one mix entry per audio track, ordered by track id.

    Placements without an audio track (silent layers) are skipped.
    """
    entries: List[AudioMixInput] = []

    for placement in audio_placements:
        track_id = audio_track_ids.get(placement.layer_id)
        if track_id is None:
            continue

        layer = placement.layer
        entries.append(AudioMixInput(
            track_id=track_id,
            layer_id=layer.id,
            time_range=placement.time_range,
            volume=layer.volume,
            gain_db=layer.get_gain_db(),
            pitch_algorithm=layer.pitch_algorithm.value,
        ))

    entries.sort(key=lambda e: e.track_id)
    return entries
