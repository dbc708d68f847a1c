""" Markdown body document assembled from @body@ comments and body files """


class Body:
    """Append-only markdown document with optional metadata"""

    def __init__(self, text=None):
        self.blocks = []
        self.metadata = {}
        if text:
            self.append(text)

    @classmethod
    def load(cls, filename):
        """Load a markdown file, parsing a leading 'key: value' metadata block"""
        with open(filename, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()

        body = cls()
        n = 0
        while n < len(lines) and ':' in lines[n] and not lines[n].startswith((' ', '\t')):
            key, value = lines[n].split(':', 1)
            if not key.strip() or ' ' in key.strip():
                break
            body.metadata[key.strip().lower()] = value.strip()
            n += 1
        if body.metadata and (n == len(lines) or not lines[n].strip()):
            lines = lines[n:]
        else:
            body.metadata = {} # Not a metadata block after all
        body.append('\n'.join(lines))
        return body

    def get_metadata(self, key, default=None):
        return self.metadata.get(key.lower(), default)

    def append(self, text):
        text = text.strip('\n')
        if text.strip():
            self.blocks.append(text)

    @property
    def text(self):
        return '\n\n'.join(self.blocks)

    def __bool__(self):
        return bool(self.blocks)
