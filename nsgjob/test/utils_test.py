import io

import pytest

from nsgjob.utils import autoDecode, humanBytes, sprint


@pytest.mark.parametrize('count, expected', [
    (0, '0 B'),
    (1023, '1023 B'),
    (1024, '1.0 KiB'),
    (1536, '1.5 KiB'),
    (5 * 1024 * 1024, '5.0 MiB'),
    (3 * 1024 ** 3, '3.0 GiB'),
])
def testHumanBytes(count, expected):
    assert humanBytes(count) == expected


@pytest.mark.parametrize('data, expected', [
    (b'', ''),
    (b'plain text', 'plain text'),
    (u'café crème brûlée à la façon'.encode('utf-8'),
     u'café crème brûlée à la façon'),
])
def testAutoDecode(data, expected):
    assert autoDecode(data) == expected


def testSprint():
    out = io.StringIO()
    sprint('a', 1, None, file=out)
    assert out.getvalue() == 'a 1 None\n'
