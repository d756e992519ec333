"""Portfolio notification service package.

Kept as a regular package so ``app`` resolves to this project rather than an
unrelated ``app`` module installed in site-packages.
"""
