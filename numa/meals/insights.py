# -*- coding: utf-8 -*-
"""Meals — per-meal score, goal-aware tips and history totals."""

from __future__ import annotations

from typing import Iterable, Optional

from ..profile.models import Goal
from .models import MealAnalysis, MealHistorySummary

DEFAULT_SCORE = 75
DEFAULT_TIP = "Keep tracking your meals for better insights!"


def _carbs_in_range(goal: Goal, carbs: float) -> bool:
    if goal is Goal.lose_weight:
        return carbs <= 40
    if goal is Goal.gain_weight:
        return carbs >= 30
    return 20 <= carbs <= 50


def nutrition_score(analysis: MealAnalysis, goal: Optional[Goal]) -> int:
    """Score a meal 30..100 against a reasonable plate for the user's goal."""
    if goal is None:
        return DEFAULT_SCORE

    score = 50
    calories = analysis.estimated_calories
    if 300 <= calories <= 600:
        score += 20
    elif 200 <= calories <= 800:
        score += 10

    protein = analysis.macros.protein
    if 15 <= protein <= 30:
        score += 15
    elif protein >= 10:
        score += 8

    if _carbs_in_range(goal, analysis.macros.carbs):
        score += 10

    fat = analysis.macros.fat
    if 8 <= fat <= 20:
        score += 15
    elif fat >= 5:
        score += 8

    return min(100, max(30, score))


def personalized_tip(analysis: MealAnalysis, goal: Optional[Goal]) -> str:
    if goal is None:
        return DEFAULT_TIP

    protein = analysis.macros.protein
    calories = analysis.estimated_calories

    if goal is Goal.lose_weight:
        if protein < 15:
            return "Add more protein to help maintain muscle while losing weight."
        if calories > 600:
            return "Consider smaller portions or lower-calorie options for weight loss."
        return "Great balance for weight loss! Keep up the good work."

    if goal is Goal.gain_weight:
        if calories < 400:
            return "Try adding healthy fats or complex carbs to increase calories."
        if protein < 20:
            return "Add more protein sources to support muscle growth."
        return "Good calorie density! Perfect for healthy weight gain."

    if protein < 15:
        return "Aim for more protein to maintain muscle mass."
    return "Well-balanced meal! Great for maintaining your current weight."


def summarize_history(meals: Iterable[MealAnalysis]) -> MealHistorySummary:
    meals = list(meals)
    total = sum(m.estimated_calories for m in meals)
    average = total // len(meals) if meals else 0
    return MealHistorySummary(total_meals=len(meals), total_calories=total, average_calories=average)
