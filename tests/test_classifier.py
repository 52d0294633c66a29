"""Tests for boundary recognition and entity extraction."""

import pytest

from dumpsplit.domain.enums import SegmentKind
from dumpsplit.pipeline.classifier import SegmentClassifier, extract_entity, is_header
from dumpsplit.types import MalformedBoundaryError


@pytest.fixture
def classifier():
    return SegmentClassifier()


@pytest.mark.parametrize("line, kind, entity", [
    ("/*!50001 DROP VIEW IF EXISTS `active_users`*/;", SegmentKind.VIEW, "active_users"),
    ("DROP TABLE IF EXISTS `orders`;", SegmentKind.SCHEMA, "orders"),
    ("LOCK TABLES `orders` WRITE;", SegmentKind.DATA, "orders"),
])
def test_boundary_lines(classifier, line, kind, entity):
    segment = classifier.classify(line)
    assert segment.kind == kind
    assert segment.entity == entity


@pytest.mark.parametrize("line", [
    "INSERT INTO `orders` VALUES (1);",
    "CREATE TABLE `orders` (",
    "/*!50001 CREATE VIEW `v` AS select 1 */;",
    "UNLOCK TABLES;",
    " DROP TABLE IF EXISTS `x`;",
    "drop table if exists `x`;",
])
def test_continuation_lines(classifier, line):
    assert classifier.classify(line) is None


def test_entity_spans_first_to_last_backtick():
    assert extract_entity("LOCK TABLES `odd`name` WRITE;") == "odd`name"
    assert extract_entity("DROP TABLE IF EXISTS ``;") == ""


@pytest.mark.parametrize("line", [
    "DROP TABLE IF EXISTS orders;",
    "LOCK TABLES `orders WRITE;",
])
def test_malformed_boundary_fails_fast(classifier, line):
    with pytest.raises(MalformedBoundaryError) as excinfo:
        classifier.classify(line, line_number=42)
    assert excinfo.value.line_number == 42
    assert "At line 42" in str(excinfo.value)


def test_rules_are_checked_in_order():
    rules = (("DROP", SegmentKind.VIEW), ("DROP TABLE", SegmentKind.SCHEMA))
    segment = SegmentClassifier(rules).classify("DROP TABLE `t`;")
    assert segment.kind == SegmentKind.VIEW


def test_header_marker():
    assert is_header("/*!40101 SET NAMES utf8mb4 */;")
    assert is_header("/*!50001 DROP VIEW IF EXISTS `v`*/;")
    assert not is_header("/* plain comment */")
    assert not is_header("SET NAMES utf8mb4;")
