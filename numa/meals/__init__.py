# -*- coding: utf-8 -*-
"""Meals domain (photo analysis, history insights).

Pipeline: imaging -> vision -> parser, wired together in ``service``.
"""
