from staking.db.driver import LedgerDriver
from staking.exceptions import InvalidKey
from staking import config


class Datum:
    def __init__(self, contract, name, driver: LedgerDriver):
        self._driver = driver
        self._key = self._driver.make_key(contract, name)


class Variable(Datum):
    def __init__(self, contract, name, driver: LedgerDriver, default_value=None):
        super().__init__(contract, name, driver=driver)
        self._default_value = default_value

    def set(self, value):
        self._driver.set(self._key, value)

    def get(self):
        value = self._driver.get(self._key)
        if value is None:
            return self._default_value
        return value


def _component(key, part):
    part = str(part)

    if config.DELIMITER in part or config.INDEX_SEPARATOR in part:
        raise InvalidKey(key=key, reason="'{}' and '{}' are reserved".format(config.DELIMITER, config.INDEX_SEPARATOR))

    return part


class Hash(Datum):
    """
    Values under <contract>.<name>:<k1>[:<k2>...]. Missing entries read as default_value.
    """
    def __init__(self, contract, name, driver: LedgerDriver, default_value=None):
        super().__init__(contract, name, driver=driver)
        self._default_value = default_value

    def _full_key(self, key):
        parts = key if isinstance(key, tuple) else (key,)

        if len(parts) > config.MAX_HASH_DIMENSIONS:
            raise InvalidKey(key=key, reason='more than {} dimensions'.format(config.MAX_HASH_DIMENSIONS))

        suffix = config.DELIMITER.join(_component(key, part) for part in parts)
        if len(suffix) > config.MAX_KEY_SIZE:
            raise InvalidKey(key=key, reason='longer than {} characters'.format(config.MAX_KEY_SIZE))

        return config.DELIMITER.join((self._key, suffix))

    def __setitem__(self, key, value):
        self._driver.set(self._full_key(key), value)

    def __getitem__(self, key):
        value = self._driver.get(self._full_key(key))
        if value is None:
            return self._default_value
        return value
