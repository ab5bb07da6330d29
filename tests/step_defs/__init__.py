"""Warehouse step definitions for the BDD scenarios.

One module per flow: common, login, inbound, outbound and inventory steps,
plus shared table helpers. The root conftest.py registers every
``*_steps.py`` module as a plugin so pytest-bdd can find the steps.
"""
