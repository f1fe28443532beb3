"""Everything specific to the Technicolor TC4400.

The generic bits (table extraction in parse.py, the decode engine in decode.py) don't know anything about
the modem; the column layout of its pages lives in metrics.py.
"""
