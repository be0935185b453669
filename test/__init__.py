"""
Test suite for the subthreshold oscillation simulator.

Run tests with:
    pytest test/
    pytest test/ -v
    pytest test/ -k "numerical"
"""
