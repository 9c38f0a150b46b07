"""Game-wide constants."""

# Combined cap: confirmed players (incl. late) + confirmed guests per game
MAX_TOTAL_PLAYERS = 24

GUEST_NAME_MAX_LENGTH = 50
MIN_RATING = 1
MAX_RATING = 10

# pg_advisory_xact_lock key serializing game creation
GAME_CREATION_LOCK_KEY = 0x6B69636B
