"""Engine signals for renderers and other observers.

Handlers run synchronously on the control thread, right after the state they
describe has been committed.
"""

from blinker import Namespace

_signals = Namespace()

# A card was shown by a scheduler.
# Sender: PlaybackScheduler. Arguments: card, index, fresh (first time revealed)
card_called = _signals.signal("card-called")

# Scheduler moved between Idle/Playing/Paused/Finished.
# Sender: PlaybackScheduler. Arguments: state
playback_changed = _signals.signal("playback-changed")

# Countdown progress refreshed (about 20 times per second while playing).
# Sender: PlaybackScheduler. Arguments: progress
progress_ticked = _signals.signal("progress-ticked")

# A board cell was marked.
# Sender: MatchController. Arguments: board, cell, by ("player" or "cpu")
cell_marked = _signals.signal("cell-marked")

# A match reached its result.
# Sender: MatchController. Arguments: result, tally
match_resolved = _signals.signal("match-resolved")

# A deck was reshuffled.
# Sender: CallerSession or MatchController.
deck_shuffled = _signals.signal("deck-shuffled")
