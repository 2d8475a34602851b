# -*- coding: utf-8 -*-
"""Numa: meal photo analysis and onboarding profile sync."""
