#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "D": "DAV:",
}

## Properties set through PROPPATCH without an explicit namespace end up
## in this namespace.  It is the one most WebDAV clients in the wild use
## for "dead" properties.
CUSTOM_NAMESPACE = "SAR:"

nsmap2: Dict[str, str] = nsmap.copy()
nsmap2["S"] = CUSTOM_NAMESPACE


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap2[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
