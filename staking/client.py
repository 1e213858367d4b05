from staking.execution.executor import Executor
from staking.execution.module import exported_functions
from staking.contracts.currency import Currency
from staking.contracts.staking import Staking
from staking.db.driver import LedgerDriver
from functools import partial

from . import config


class AbstractContract:
    def __init__(self, name, signer, environment, executor: Executor, funcs):
        self.name = name
        self.signer = signer
        self.environment = environment
        self.executor = executor
        self.functions = funcs

        # set up virtual functions
        for func in funcs:
            # each function is a partial that allows kwarg overloading and overriding
            setattr(self, func, partial(self._abstract_function_call,
                                        signer=self.signer,
                                        contract_name=self.name,
                                        executor=self.executor,
                                        func=func,
                                        environment=self.environment))

    def quick_write(self, variable, key=None, value=None, args=None):
        if key is not None:
            a = [key]
        else:
            a = []

        if args is not None and isinstance(args, list):
            for arg in args:
                a.append(arg)

        k = self.executor.driver.make_key(contract=self.name, variable=variable, args=a)

        self.executor.driver.set(k, value)
        self.executor.driver.commit()

    def run_private_function(self, f, signer=None, environment=None, **kwargs):
        # Override kwargs if provided
        signer = signer or self.signer
        environment = environment or self.environment

        # Let executor access private functions
        self.executor.bypass_privates = True

        try:
            return self._abstract_function_call(signer=signer, executor=self.executor, contract_name=self.name,
                                                 environment=environment, func=f, **kwargs)
        finally:
            # Set executor back to restricted mode
            self.executor.bypass_privates = False

    def _abstract_function_call(self, signer, executor, contract_name, environment, func, block_num=None, **kwargs):
        environment = dict(environment)
        if block_num is not None:
            environment.update({'block_num': block_num})

        output = executor.execute(sender=signer,
                                  contract_name=contract_name,
                                  function_name=func,
                                  kwargs=kwargs,
                                  environment=environment)

        if output['status_code'] == 1:
            raise output['result']

        return output['result']


class StakingClient:
    def __init__(self, signer='sys',
                 driver=None,
                 environment=None,
                 balances=None,
                 staking_period=config.STAKING_PERIOD,
                 tick_duration=config.TICK_DURATION,
                 balance_policy=config.BALANCE_POLICY_UNLOCKED):

        self.raw_driver = driver or LedgerDriver()
        self.executor = Executor(driver=self.raw_driver)
        self.signer = signer
        self.environment = environment or {}

        self.currency = Currency(driver=self.raw_driver)
        self.staking = Staking(driver=self.raw_driver,
                               token=self.currency.name,
                               staking_period=staking_period,
                               tick_duration=tick_duration,
                               balance_policy=balance_policy)

        self.executor.install(self.currency)
        self.executor.install(self.staking)

        if balances:
            self.seed(balances)

    def seed(self, balances: dict):
        self.get_contract(self.currency.name).run_private_function('seed', balances=balances)

    def flush(self):
        # flushes db, installed contracts stay in place
        self.raw_driver.flush()

    def set_block_num(self, block_num):
        self.environment.update({'block_num': block_num})

    # Returns abstract contract which has partial methods mapped to each exported function.
    def get_contract(self, name):
        contract = self.executor.contracts.get(name)

        if contract is None:
            return None

        return AbstractContract(name=name,
                                signer=self.signer,
                                environment=self.environment,
                                executor=self.executor,
                                funcs=exported_functions(contract))

    def get_contracts(self):
        return sorted(self.executor.contracts.keys())

    def get_var(self, contract, variable, arguments=[]):
        return self.raw_driver.get_var(contract, variable, arguments)

    def set_var(self, contract, variable, arguments=[], value=None):
        self.raw_driver.set_var(contract, variable, arguments, value)
