from unittest import TestCase
from staking.client import StakingClient, AbstractContract
from staking.db.driver import InMemDriver, LedgerDriver
from staking.exceptions import PrivateMethod, NoStakeHistory
from staking import config


class TestClient(TestCase):
    def setUp(self):
        self.raw_driver = InMemDriver()
        self.driver = LedgerDriver(driver=self.raw_driver)
        self.client = StakingClient(driver=self.driver)

    def tearDown(self):
        self.client.flush()

    def test_installs_currency_and_staking(self):
        self.assertListEqual(self.client.get_contracts(), ['currency', 'staking'])

    def test_get_contract_returns_abstract_contract(self):
        staking = self.client.get_contract('staking')

        self.assertIsInstance(staking, AbstractContract)
        self.assertIn('stake', staking.functions)
        self.assertIn('claim_all', staking.functions)
        self.assertNotIn('_reconcile', staking.functions)

    def test_get_missing_contract_returns_none(self):
        self.assertIsNone(self.client.get_contract('nope'))

    def test_seed_sets_balances_and_supply(self):
        self.client.seed({'stu': 100, 'colin': 5})

        currency = self.client.get_contract('currency')

        self.assertEqual(currency.balance_of(account='stu'), 100)
        self.assertEqual(currency.total_supply(), 105)

    def test_seed_twice_fails(self):
        self.client.seed({'stu': 100})

        with self.assertRaises(AssertionError):
            self.client.seed({'stu': 100})

    def test_seed_through_constructor(self):
        client = StakingClient(driver=LedgerDriver(driver=InMemDriver()), balances={'stu': 7})

        self.assertEqual(client.get_var('currency', 'balances', ['stu']), 7)

    def test_seed_is_not_exported(self):
        currency = self.client.get_contract('currency')

        output = currency.executor.execute(sender='sys', contract_name='currency', function_name='seed',
                                           kwargs={'balances': {'sys': 1}})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], PrivateMethod)

        with self.assertRaises(AttributeError):
            currency.seed(balances={'sys': 1})

    def test_run_private_function_restores_restricted_mode(self):
        currency = self.client.get_contract('currency')
        currency.run_private_function('seed', balances={'stu': 1})

        self.assertFalse(currency.executor.bypass_privates)

    def test_signer_defaults_to_client_signer(self):
        client = StakingClient(signer='stu', driver=self.driver, balances={'stu': 100})
        client.get_contract('staking').stake(amount=10, block_num=0)

        self.assertEqual(client.get_contract('staking').get_staked_amount(account='stu'), 10)

    def test_signer_can_be_overridden_per_call(self):
        self.client.seed({'stu': 100, 'colin': 100})
        staking = self.client.get_contract('staking')

        staking.stake(amount=10, signer='colin', block_num=0)

        self.assertEqual(staking.get_staked_amount(account='colin'), 10)
        with self.assertRaises(NoStakeHistory):
            staking.get_stakes(account='stu')

    def test_set_block_num_is_used_as_clock(self):
        self.client.seed({'stu': 100})
        self.client.set_block_num(42)

        staking = self.client.get_contract('staking')
        staking.stake(amount=10, signer='stu')

        self.assertEqual(staking.get_staked_timestamp(account='stu'), 42)

    def test_block_num_kwarg_does_not_change_client_environment(self):
        self.client.seed({'stu': 100})
        self.client.set_block_num(42)

        staking = self.client.get_contract('staking')
        staking.stake(amount=10, signer='stu', block_num=7)

        self.assertEqual(staking.get_staked_timestamp(account='stu'), 7)
        self.assertEqual(self.client.environment['block_num'], 42)

    def test_get_and_set_var(self):
        self.client.set_var('currency', 'balances', ['stu'], value=55)

        self.assertEqual(self.client.get_var('currency', 'balances', ['stu']), 55)

    def test_quick_write_commits(self):
        currency = self.client.get_contract('currency')
        currency.quick_write('balances', 'stu', 12)

        self.assertEqual(self.raw_driver.get('currency.balances:stu'), 12)
        self.assertEqual(currency.balance_of(account='stu'), 12)

    def test_quick_write_multi_dimensional(self):
        currency = self.client.get_contract('currency')
        currency.quick_write('allowances', 'stu', 3, args=['staking'])

        self.assertEqual(currency.allowance(owner='stu', spender='staking'), 3)

    def test_flush_clears_state(self):
        self.client.seed({'stu': 1})
        self.client.flush()

        self.assertIsNone(self.raw_driver.get('currency.balances:stu'))
        self.assertListEqual(self.client.get_contracts(), ['currency', 'staking'])

    def test_custom_curve_constants(self):
        client = StakingClient(driver=LedgerDriver(driver=InMemDriver()),
                               balances={'stu': 100},
                               staking_period=10,
                               tick_duration=1,
                               balance_policy=config.BALANCE_POLICY_LEGACY)

        self.assertEqual(client.staking.staking_period, 10)
        self.assertEqual(client.staking.balance_policy, config.BALANCE_POLICY_LEGACY)

        # one clock is two ticks
        self.assertEqual(client.get_contract('staking').get_unlock_level(since_tick=0, block_num=2), 5)
