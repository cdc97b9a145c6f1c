#!/usr/bin/python3

"""Emit a synthetic amplitude feed as JSON lines on stdout."""

import time
import math
import json
import sys

while True:
    print(json.dumps({
        "amplitude": int(40 + 35 * math.sin(time.time() * 3) * math.sin(time.time() * 0.7))
    }))
    time.sleep(0.025)
    sys.stdout.flush()
