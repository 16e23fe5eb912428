"""
pppoat - PPP over Any Transport.

Transport modules that carry a point-to-point link byte stream (for example
the pty of a PPP daemon) over a network transport.
"""
