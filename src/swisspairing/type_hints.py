"""Type hints used in Swiss Pairing."""

from typing import Callable, Dict

# Opaque participant / match identifiers
ParticipantId = str
MatchId = str

# "Alice vs Bob", names sorted lexicographically
PairKey = str

# Rematch count in one trial -> number of trials
RematchDistribution = Dict[int, int]
# Round number -> rematches summed over trials
RoundTally = Dict[int, int]

# Called with the number of completed trials
ProgressCallback = Callable[[int], None]

#  LocalWords:  PairKey
