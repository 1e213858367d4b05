import os

DB_TYPE = os.getenv('STAKING_DB_TYPE', 'memory')

MONGO_URL = os.getenv('STAKING_MONGO_URL', 'mongodb://localhost:27017')
MONGO_DB = os.getenv('STAKING_MONGO_DB', 'staking')
MONGO_COLLECTION = os.getenv('STAKING_MONGO_COLLECTION', 'state')
MONGO_TIMEOUT_MS = 500

DELIMITER = ':'
INDEX_SEPARATOR = '.'

MAX_HASH_DIMENSIONS = 16
MAX_KEY_SIZE = 1024

PRIVATE_METHOD_PREFIX = '_'

# Contract names
CURRENCY_CONTRACT = 'currency'
STAKING_CONTRACT = 'staking'

# Unlock curve
STAKING_PERIOD = 86400 * 5
TICK_DURATION = 5
UNLOCK_STEPS = 5
UNLOCK_OFFSET = 4
MAX_UNLOCK_LEVEL = 10

BALANCE_POLICY_UNLOCKED = 'unlocked'
BALANCE_POLICY_LEGACY = 'legacy'
BALANCE_POLICIES = {BALANCE_POLICY_UNLOCKED, BALANCE_POLICY_LEGACY}
