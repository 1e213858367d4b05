from staking.execution import runtime
from staking.execution.module import install_contract_registry, get_contract, get_function
from staking.db.driver import LedgerDriver
from staking.exceptions import StakingError
from staking.logger import get_logger
from copy import deepcopy
import traceback

log = get_logger('Executor')


class Executor:
    def __init__(self, driver=None, bypass_privates=False):
        self.driver = driver

        if not self.driver:
            self.driver = LedgerDriver()

        self.contracts = {}
        self.bypass_privates = bypass_privates

    def install(self, contract):
        self.contracts[contract.name] = contract

    def execute(self, sender, contract_name, function_name, kwargs,
                environment={},
                auto_commit=True) -> dict:

        install_contract_registry(self.contracts)
        runtime.rt.env.update({'__Driver': self.driver})

        writes = {}
        try:
            runtime.rt.set_up(sender=sender, contract_name=contract_name, environment=environment)

            contract = get_contract(contract_name)
            func = get_function(contract, function_name, bypass_privates=self.bypass_privates)

            result = func(**kwargs)
            status_code = 0

            writes = deepcopy(self.driver.pending_writes)
            if auto_commit:
                self.driver.commit()
        except StakingError as e:
            result = e
            status_code = 1
            log.warning('{}.{} rejected for {}: {}'.format(contract_name, function_name, sender, e))
            self.driver.clear_pending_state()
        except Exception as e:
            result = e
            status_code = 1
            log.error('{}.{} failed for {}: {}'.format(contract_name, function_name, sender, e))
            log.debug(traceback.format_exc())

            # Nothing a failed call wrote survives, nested contract calls included
            self.driver.clear_pending_state()
        finally:
            runtime.rt.clean_up()

        output = {
            'status_code': status_code,
            'result': result,
            'writes': writes,
        }

        return output
