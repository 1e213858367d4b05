from unittest import TestCase
from staking.execution.executor import Executor
from staking.execution.module import export, is_exported, exported_functions, import_contract, \
    install_contract_registry, ForeignContract
from staking.execution.runtime import rt
from staking.contracts.base import Contract
from staking.db.driver import LedgerDriver, InMemDriver
from staking.exceptions import ContractNotFound, PrivateMethod, NothingToClaim


class Counter(Contract):
    def __init__(self, driver, name='counter'):
        super().__init__(name, driver)
        self.count = self.variable('count', default_value=0)
        self.callers = self.hash('callers', default_value=0)

    @export
    def increment(self, amount=1):
        self.count.set(self.count.get() + amount)
        self.callers[self.ctx.caller] += 1
        return self.count.get()

    @export
    def increment_then_fail(self):
        self.count.set(self.count.get() + 1)
        raise NothingToClaim(account=self.ctx.caller)

    @export
    def whoami(self):
        return {'this': self.ctx.this, 'caller': self.ctx.caller, 'signer': self.ctx.signer, 'now': self.now}

    @export
    def _hidden(self):
        return 'should not run'

    def secret(self):
        return 'secret'


class Relay(Contract):
    def __init__(self, driver, name='relay'):
        super().__init__(name, driver)

    @export
    def forward(self):
        return self.import_contract('counter').whoami()

    @export
    def forward_increment_then_fail(self):
        self.import_contract('counter').increment()
        raise ValueError('boom')

    @export
    def call_secret(self):
        return self.import_contract('counter').secret()


class TestModule(TestCase):
    def setUp(self):
        self.driver = LedgerDriver(driver=InMemDriver())
        self.counter = Counter(self.driver)

    def tearDown(self):
        install_contract_registry({})

    def test_is_exported(self):
        self.assertTrue(is_exported(self.counter, 'increment'))
        self.assertFalse(is_exported(self.counter, 'secret'))
        self.assertFalse(is_exported(self.counter, '_hidden'))
        self.assertFalse(is_exported(self.counter, 'count'))

    def test_exported_functions(self):
        self.assertListEqual(exported_functions(self.counter), ['increment', 'increment_then_fail', 'whoami'])

    def test_import_missing_contract(self):
        install_contract_registry({})

        with self.assertRaises(ContractNotFound):
            import_contract('counter')

    def test_import_contract(self):
        install_contract_registry({'counter': self.counter})

        c = import_contract('counter')

        self.assertIsInstance(c, ForeignContract)
        self.assertEqual(c.name, 'counter')

    def test_foreign_private_call_rejected(self):
        install_contract_registry({'counter': self.counter})

        with self.assertRaises(PrivateMethod):
            import_contract('counter').secret


class TestExecutor(TestCase):
    def setUp(self):
        self.driver = LedgerDriver(driver=InMemDriver())
        self.e = Executor(driver=self.driver)
        self.e.install(Counter(self.driver))
        self.e.install(Relay(self.driver))

    def tearDown(self):
        self.driver.flush()

    def test_execute_success(self):
        output = self.e.execute('stu', 'counter', 'increment', kwargs={'amount': 5})

        self.assertEqual(output['status_code'], 0)
        self.assertEqual(output['result'], 5)
        self.assertEqual(output['writes']['counter.count'], 5)

    def test_execute_commits(self):
        self.e.execute('stu', 'counter', 'increment', kwargs={})

        self.assertEqual(self.driver.driver.get('counter.count'), 1)
        self.assertDictEqual(self.driver.pending_writes, {})

    def test_execute_without_auto_commit_leaves_pending(self):
        self.e.execute('stu', 'counter', 'increment', kwargs={}, auto_commit=False)

        self.assertIsNone(self.driver.driver.get('counter.count'))
        self.assertEqual(self.driver.get('counter.count'), 1)

    def test_failure_discards_writes(self):
        self.e.execute('stu', 'counter', 'increment', kwargs={})
        output = self.e.execute('stu', 'counter', 'increment_then_fail', kwargs={})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], NothingToClaim)
        self.assertDictEqual(output['writes'], {})
        self.assertEqual(self.driver.get('counter.count'), 1)

    def test_failure_discards_nested_writes(self):
        output = self.e.execute('stu', 'relay', 'forward_increment_then_fail', kwargs={})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], ValueError)
        self.assertIsNone(self.driver.get('counter.count'))

    def test_unknown_contract(self):
        output = self.e.execute('stu', 'nope', 'increment', kwargs={})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], ContractNotFound)

    def test_private_method_not_callable(self):
        output = self.e.execute('stu', 'counter', 'secret', kwargs={})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], PrivateMethod)

    def test_underscore_method_not_callable_even_if_exported(self):
        output = self.e.execute('stu', 'counter', '_hidden', kwargs={})

        self.assertIsInstance(output['result'], PrivateMethod)

    def test_bypass_privates(self):
        self.e.bypass_privates = True
        output = self.e.execute('stu', 'counter', 'secret', kwargs={})

        self.assertEqual(output['result'], 'secret')

    def test_bad_kwargs_are_a_failed_call(self):
        output = self.e.execute('stu', 'counter', 'increment', kwargs={'wrong': 1})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], TypeError)

    def test_context_and_environment(self):
        output = self.e.execute('stu', 'counter', 'whoami', kwargs={}, environment={'block_num': 42})

        self.assertDictEqual(output['result'], {'this': 'counter', 'caller': 'stu', 'signer': 'stu', 'now': 42})

    def test_environment_does_not_leak_between_calls(self):
        self.e.execute('stu', 'counter', 'whoami', kwargs={}, environment={'block_num': 42})
        output = self.e.execute('stu', 'counter', 'whoami', kwargs={})

        self.assertEqual(output['result']['now'], 0)

    def test_nested_call_changes_caller(self):
        output = self.e.execute('stu', 'relay', 'forward', kwargs={}, environment={'block_num': 7})

        self.assertDictEqual(output['result'], {'this': 'counter', 'caller': 'relay', 'signer': 'stu', 'now': 7})

    def test_caller_recorded_by_contract(self):
        self.e.execute('stu', 'counter', 'increment', kwargs={})

        self.assertEqual(self.driver.get('counter.callers:stu'), 1)

    def test_nested_private_call_fails(self):
        output = self.e.execute('stu', 'relay', 'call_secret', kwargs={})

        self.assertIsInstance(output['result'], PrivateMethod)

    def test_context_reset_after_call(self):
        self.e.execute('stu', 'relay', 'forward', kwargs={})

        self.assertIsNone(rt.context.this)
        self.assertIsNone(rt.context.caller)
