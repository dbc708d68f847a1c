""" Bounded token buffer """

BUFFER_SIZE = 65536


class StringBuf:
    """Accumulates identifiers, comments and literals.

    The buffer holds at most BUFFER_SIZE - 1 bytes of UTF-8; characters
    that don't fit are dropped and append() returns False.
    """

    def __init__(self):
        self.clear()

    def clear(self):
        self.chars, self.size = [], 0

    def append(self, ch):
        n = len(ch.encode('utf-8'))
        if self.size + n > BUFFER_SIZE - 1:
            return False
        self.chars.append(ch)
        self.size += n
        return True

    def get(self):
        return ''.join(self.chars)

    def getlast(self):
        return self.chars[-1] if self.chars else ''

    def __len__(self):
        return self.size
