"""Shared Kernel.

Small set of building blocks that both the consistency context and the host
infrastructure depend on. Nothing in here may import either of them.
"""
