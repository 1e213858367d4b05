from staking.db.encoder import encode, decode, make_key
from staking.exceptions import DatabaseDriverNotFound
from staking.logger import get_logger
from staking import config
import pymongo
import json

# DB maps bytes to bytes
# Driver maps string to python object

logger = get_logger('Driver')


class InMemDriver:
    def __init__(self):
        self.db = {}

    def get(self, item: str):
        value = self.db.get(item.encode())
        if value is None:
            return None
        return decode(value)

    def set(self, key: str, value):
        if value is None:
            self.delete(key)
        else:
            self.db[key.encode()] = encode(value).encode()

    def delete(self, key: str):
        self.db.pop(key.encode(), None)

    def flush(self):
        self.db.clear()


class MongoDriver:
    # conn_str see https://www.mongodb.com/docs/manual/reference/connection-string/
    def __init__(self, conn_str=config.MONGO_URL, db=config.MONGO_DB, collection=config.MONGO_COLLECTION):
        self.client = pymongo.MongoClient(conn_str, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)
        self.db = self.client[db][collection]
        logger.debug('Using collection {}.{} at {}'.format(db, collection, conn_str))

    def get(self, item: str):
        v = self.db.find_one({'_id': item})
        if v is None:
            return None

        return decode(encode(v['value']))

    def set(self, key, value):
        if value is None:
            self.delete(key)
            return

        # Store the tagged JSON form so documents stay readable from the mongo shell
        self.db.replace_one({'_id': key}, {'_id': key, 'value': decode_plain(encode(value))}, upsert=True)

    def delete(self, key: str):
        self.db.delete_one({'_id': key})

    def flush(self):
        self.db.delete_many({})


def decode_plain(data: str):
    # Tagged objects are kept as dicts, only the JSON layer is removed
    return json.loads(data)


DRIVERS = {
    'memory': InMemDriver,
    'mongo': MongoDriver
}


def get_driver(db_type=None):
    db_type = db_type or config.DB_TYPE

    driver_class = DRIVERS.get(db_type)
    if driver_class is None:
        raise DatabaseDriverNotFound(driver=db_type, known_drivers=sorted(DRIVERS.keys()))

    return driver_class()


class CacheDriver:
    def __init__(self, driver=None):
        self.pending_writes = {}  # L1 cache
        self.pending_reads = {}
        self.driver = driver or get_driver()  # L0 cache

    def find(self, key: str):
        # A pending None is a pending delete
        if key in self.pending_writes:
            return self.pending_writes[key]

        return self.driver.get(key)

    def get(self, key: str, save: bool = True):
        value = self.find(key)

        if save and key not in self.pending_reads:
            self.pending_reads[key] = value

        return value

    def set(self, key, value):
        if key not in self.pending_reads:
            self.get(key)

        self.pending_writes[key] = value

    def commit(self):
        for k, v in self.pending_writes.items():
            if v is None:
                self.driver.delete(k)
            else:
                self.driver.set(k, v)

        self.pending_writes.clear()
        self.pending_reads = {}

    def rollback(self):
        # Returns to disk state which should be whatever it was prior to any write sessions
        self.pending_reads = {}
        self.pending_writes.clear()

    def clear_pending_state(self):
        self.rollback()


class LedgerDriver(CacheDriver):
    def make_key(self, contract, variable, args=[]):
        return make_key(contract, variable, args)

    def get_var(self, contract, variable, arguments=[]):
        return self.get(self.make_key(contract, variable, arguments))

    def set_var(self, contract, variable, arguments=[], value=None):
        self.set(self.make_key(contract, variable, arguments), value)

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()
