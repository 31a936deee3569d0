from contextlib import contextmanager
import io
import os
import sys

from nsgjob.domain import FetchedFile

HOME = '/home/me'


def resetEnv():
    os.environ['HOME'] = HOME
    os.environ['NSGJOB_STATE_DIR'] = '/tmp/BADDIR'
    os.environ.pop('USERPROFILE', None)


@contextmanager
def capturedOutput():
    ''' Used to capture stdout or stderr.
    eg.
    with capturedOutput() as (out, err):
        print("foo")

    self.assertEqual(out.getvalue(), "foo")
    '''
    newOut, newErr = io.StringIO(), io.StringIO()
    oldOut, oldErr = sys.stdout, sys.stderr
    try:
        sys.stdout, sys.stderr = newOut, newErr
        yield sys.stdout, sys.stderr
    finally:
        sys.stdout, sys.stderr = oldOut, oldErr


def writeResults(destination, files, onProgress=None):
    '''
    Stand-in for a results fetcher: writes {name: bytes} into destination
    and reports one progress event per file.
    '''
    fetched = []
    for name, data in files:
        path = os.path.join(destination, name)
        with open(path, 'wb') as out:
            out.write(data)
        if onProgress is not None:
            onProgress(name, len(data), len(data))
        fetched.append(FetchedFile(path=path, filename=name, size=len(data)))
    return fetched


class RecordingObserver(object):
    '''Progress observer that keeps what it receives.'''

    def __init__(self):
        self.events = []
        self.completed = 0

    def on_progress(self, event):
        self.events.append(event)

    def on_complete(self):
        self.completed += 1
