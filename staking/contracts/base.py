from staking.execution.runtime import rt
from staking.execution.module import import_contract
from staking.db.orm import Variable, Hash


class Contract:
    def __init__(self, name, driver):
        self.name = name
        self.driver = driver

    @property
    def ctx(self):
        return rt.context

    @property
    def now(self):
        return rt.block_num

    def variable(self, name, **kwargs):
        return Variable(contract=self.name, name=name, driver=self.driver, **kwargs)

    def hash(self, name, **kwargs):
        return Hash(contract=self.name, name=name, driver=self.driver, **kwargs)

    def import_contract(self, name):
        return import_contract(name)
