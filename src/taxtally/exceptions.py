__all__ = ['TaxTallyError', 'ClassificationError', 'ShortSequenceError',
           'TreeStructureError', 'ResultParseError']


class TaxTallyError(Exception):
    def __init__(self, msg):
        Exception.__init__(self)
        self.message = msg

    def __str__(self):
        return self.message


class ClassificationError(TaxTallyError):
    "A single sequence could not be classified; the run continues."
    def __init__(self, msg, seqname=None):
        TaxTallyError.__init__(self, msg)
        self.seqname = seqname


class ShortSequenceError(ClassificationError):
    def __init__(self, seqname, length=None):
        msg = f"sequence '{seqname}' is too short to classify"
        if length is not None:
            msg += f" (length {length})"
        ClassificationError.__init__(self, msg, seqname=seqname)
        self.length = length


class TreeStructureError(TaxTallyError):
    "The taxonomy tree would be left inconsistent; not recoverable."
    pass


class ResultParseError(TaxTallyError, ValueError):
    def __init__(self, msg, lineno=None):
        if lineno is not None:
            msg = f"line {lineno}: {msg}"
        TaxTallyError.__init__(self, msg)
        self.lineno = lineno
