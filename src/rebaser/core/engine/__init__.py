"""Safe-rebase propagation engine.

Every function here takes a RebaserContext whose ``cwd`` is the repository
root; rebaser.core.sync establishes that before calling in.
"""
