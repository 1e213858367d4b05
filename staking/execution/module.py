from staking.execution.runtime import rt
from staking.exceptions import ContractNotFound, PrivateMethod
from staking import config

# Contracts are Python objects rather than modules pulled from state. The executor installs its registry into the
# runtime environment under '__Contracts' before every call, so contract-to-contract calls resolve against the
# registry of the executor that is running the transaction.

EXPORT_ATTRIBUTE = '__export__'


def export(f):
    setattr(f, EXPORT_ATTRIBUTE, True)
    return f


def is_exported(contract, function_name):
    if function_name.startswith(config.PRIVATE_METHOD_PREFIX):
        return False

    func = getattr(type(contract), function_name, None)
    return callable(func) and getattr(func, EXPORT_ATTRIBUTE, False)


def exported_functions(contract):
    return sorted(name for name in dir(type(contract)) if is_exported(contract, name))


def install_contract_registry(contracts: dict):
    rt.env.update({'__Contracts': contracts})


def get_contract(name):
    contracts = rt.env.get('__Contracts') or {}

    contract = contracts.get(name)
    if contract is None:
        raise ContractNotFound(name=name)

    return contract


def get_function(contract, function_name, bypass_privates=False):
    if not bypass_privates and not is_exported(contract, function_name):
        raise PrivateMethod(contract=contract.name, function=function_name)

    func = getattr(contract, function_name, None)
    if func is None:
        raise PrivateMethod(contract=contract.name, function=function_name)

    return func


class ForeignContract:
    """
    Handle one contract gets on another. Every call runs in a fresh context frame where the
    calling contract becomes ctx.caller and the signer is carried through.
    """
    def __init__(self, contract):
        self._contract = contract

    @property
    def name(self):
        return self._contract.name

    def __getattr__(self, item):
        func = get_function(self._contract, item)
        name = self._contract.name

        def call(*args, **kwargs):
            pushed = rt.context._add_state({
                'this': name,
                'caller': rt.context.this,
                'signer': rt.context.signer
            })
            try:
                return func(*args, **kwargs)
            finally:
                if pushed:
                    rt.context._pop_state()

        return call

    def __repr__(self):
        return '<ForeignContract {!r}>'.format(self._contract.name)


def import_contract(name):
    return ForeignContract(get_contract(name))
