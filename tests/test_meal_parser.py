# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from numa.meals.errors import InvalidResponse, NoFoodDetected
from numa.meals.parser import extract_json, parse_analysis
from tests.helpers import meal_json

EGG_REPLY = (
    'blah {"ingredients":["egg"],"estimated_calories":200,'
    '"macros":{"protein":10,"carbs":5,"fat":3},"confidence":%s} blah'
)


class TestMealParser(unittest.TestCase):
    def test_low_confidence_means_no_food(self) -> None:
        with self.assertRaises(NoFoodDetected):
            parse_analysis(EGG_REPLY % "0.2")

    def test_parses_object_surrounded_by_prose(self) -> None:
        analysis = parse_analysis(EGG_REPLY % "0.5")
        self.assertEqual(analysis.ingredients, ["egg"])
        self.assertEqual(analysis.estimated_calories, 200)
        self.assertEqual(analysis.macros.protein, 10.0)
        self.assertEqual(analysis.macros.carbs, 5.0)
        self.assertEqual(analysis.macros.fat, 3.0)
        self.assertEqual(analysis.confidence, 0.5)
        self.assertIsNone(analysis.analysis_text)
        self.assertTrue(analysis.id)

    def test_threshold_itself_is_accepted(self) -> None:
        analysis = parse_analysis(EGG_REPLY % "0.3")
        self.assertEqual(analysis.confidence, 0.3)

    def test_code_fence_is_ignored(self) -> None:
        reply = "Here you go:\n```json\n" + meal_json() + "\n```\nEnjoy!"
        analysis = parse_analysis(reply)
        self.assertEqual(analysis.ingredients, ["rice", "chicken"])
        self.assertEqual(analysis.analysis_text, "Chicken with rice")

    def test_percentage_confidence_is_scaled(self) -> None:
        analysis = parse_analysis(meal_json(confidence=85))
        self.assertAlmostEqual(analysis.confidence, 0.85)

    def test_rejection_uses_reported_confidence(self) -> None:
        for reported, stored in ((1.5, 0.015), (25, 0.25)):
            analysis = parse_analysis(meal_json(confidence=reported))
            self.assertAlmostEqual(analysis.confidence, stored)

    def test_confidence_above_percent_range_is_capped(self) -> None:
        analysis = parse_analysis(meal_json(confidence=250))
        self.assertEqual(analysis.confidence, 1.0)

    def test_reply_without_object_is_invalid(self) -> None:
        with self.assertRaises(InvalidResponse):
            parse_analysis("I can't see any food in this picture.")

    def test_missing_field_is_invalid(self) -> None:
        with self.assertRaises(InvalidResponse):
            parse_analysis('{"ingredients": ["egg"], "confidence": 0.9}')

    def test_extract_json_spans_first_to_last_brace(self) -> None:
        self.assertEqual(extract_json('x {"a": {"b": 1}} y'), '{"a": {"b": 1}}')
        self.assertEqual(extract_json("  no json  "), "no json")


if __name__ == "__main__":
    unittest.main()
