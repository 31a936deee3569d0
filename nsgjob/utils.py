import logging

import chardet

SPACER_EACH = "========================================"
SPACER = SPACER_EACH + SPACER_EACH

LOG = logging.getLogger(__name__)


def strForEach(value):
    try:
        return str(value)
    except (UnicodeDecodeError, UnicodeEncodeError):
        LOG.debug("%r", value, exc_info=1)
        return '{!r}'.format(value)


def sprint(*args, **kwargs):
    """sprint: "safe" print - ignore IOError"""
    try:
        print(*list(map(strForEach, args)), **kwargs)
    except IOError:
        LOG.debug("sprint ignore IOError", exc_info=1)
    except (UnicodeEncodeError, UnicodeDecodeError):
        print('codec error', repr(args))
        LOG.debug("%r", args, exc_info=1)
    except BaseException:
        LOG.debug("sprint caught error", exc_info=1)
        raise


def autoDecode(byteArray):
    if not byteArray:
        return ""
    detected = chardet.detect(byteArray)
    encoding = detected['encoding']
    if encoding is None or detected['confidence'] < 0.5:  # very arbitrary
        encoding = 'utf-8'
    return byteArray.decode(encoding, errors='replace')


def humanBytes(count):
    if count < 1024:
        return "%d B" % count
    value = float(count)
    unit = "B"
    for unit in ("KiB", "MiB", "GiB"):
        value /= 1024
        if value < 1024:
            break
    return "%.1f %s" % (value, unit)
