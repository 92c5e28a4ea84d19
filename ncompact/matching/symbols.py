"""
A source of fresh symbols that never collide with those already in use.
"""

from ..core.concepts import Symbol


class NewSymbolStream:
    """
    Yields Symbols v1, v2, ... skipping any text that occurs in the
    concepts given at construction (or added later with avoid()).
    """

    def __init__(self, *concepts, prefix: str = "v"):
        self.prefix = prefix
        self.counter = 0
        self.used = set()
        self.avoid(*concepts)

    def avoid(self, *concepts):
        for lc in concepts:
            for d in lc.descendants():
                if isinstance(d, Symbol):
                    self.used.add(d.text)

    def copy(self) -> "NewSymbolStream":
        result = NewSymbolStream(prefix=self.prefix)
        result.counter = self.counter
        result.used = set(self.used)
        return result

    def next(self) -> Symbol:
        while True:
            self.counter += 1
            text = f"{self.prefix}{self.counter}"
            if text not in self.used:
                self.used.add(text)
                return Symbol(text)

    def next_n(self, n: int) -> list:
        return [self.next() for _ in range(n)]
