# -*- coding: utf-8 -*-
"""Profile domain (onboarding answers, local + remote persistence)."""
