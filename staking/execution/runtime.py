RECURSION_LIMIT = 1024


class Context:
    def __init__(self, base_state, maxlen=RECURSION_LIMIT):
        self._state = []
        self._base_state = base_state
        self._maxlen = maxlen

    def _context_changed(self, contract):
        if self._get_state()['this'] == contract:
            return False
        return True

    def _get_state(self):
        if len(self._state) == 0:
            return self._base_state
        return self._state[-1]

    def _add_state(self, state: dict):
        # Returns whether a frame was pushed so callers only pop what they added
        if self._context_changed(state['this']):
            assert len(self._state) < self._maxlen, 'Maximum contract call depth reached.'
            self._state.append(state)
            return True
        return False

    def _pop_state(self):
        if len(self._state) > 0:
            self._state.pop(-1)

    def _reset(self):
        self._state = []

    @property
    def this(self):
        return self._get_state()['this']

    @property
    def caller(self):
        return self._get_state()['caller']

    @property
    def signer(self):
        return self._get_state()['signer']


_context = Context({
        'this': None,
        'caller': None,
        'signer': None
    })


class Runtime:
    env = {}

    context = _context

    @classmethod
    def set_up(cls, sender, contract_name, environment):
        cls.env.update(environment)
        cls.context._reset()
        cls.context._base_state = {
            'signer': sender,
            'caller': sender,
            'this': contract_name
        }

    @classmethod
    def clean_up(cls):
        cls.context._reset()
        cls.context._base_state = {
            'this': None,
            'caller': None,
            'signer': None
        }

        for key in [k for k in cls.env.keys() if not k.startswith('__')]:
            del cls.env[key]

    @property
    def block_num(self):
        return self.env.get('block_num', 0)


rt = Runtime()
