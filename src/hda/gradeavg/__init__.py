"""gradeavg: OBS grade average calculator.

This package logs into the h_da OBS portal, scrapes the grade overview and
the per-module grade statistics, and computes the credit-point-weighted
average of the module averages.
"""
