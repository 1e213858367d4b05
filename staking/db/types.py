class StakeEntry:
    """
    One deposit and how much of it has been paid out so far.

    Entries are values. Claims replace an entry with a copy carrying the new
    withdrawn amount; amount and timestamp never change once recorded.
    """
    __slots__ = ('_amount', '_timestamp', '_withdrawn')

    def __init__(self, amount: int, timestamp: int, withdrawn: int = 0):
        self._amount = amount
        self._timestamp = timestamp
        self._withdrawn = withdrawn

    @property
    def amount(self):
        return self._amount

    @property
    def timestamp(self):
        return self._timestamp

    @property
    def withdrawn(self):
        return self._withdrawn

    @property
    def exhausted(self):
        return self._withdrawn == self._amount

    def withdraw(self, amount: int):
        return StakeEntry(self._amount, self._timestamp, self._withdrawn + amount)

    def to_dict(self):
        return {
            'amount': self._amount,
            'timestamp': self._timestamp,
            'withdrawn': self._withdrawn
        }

    def __eq__(self, other):
        if not isinstance(other, StakeEntry):
            return NotImplemented
        return (self._amount, self._timestamp, self._withdrawn) == \
               (other._amount, other._timestamp, other._withdrawn)

    def __hash__(self):
        return hash((self._amount, self._timestamp, self._withdrawn))

    def __repr__(self):
        return '<StakeEntry amount={} timestamp={} withdrawn={}>'.format(
            self._amount, self._timestamp, self._withdrawn
        )
