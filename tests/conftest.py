import gzip
import logging
import signal
from pathlib import Path

import pytest

from dumpsplit.config.settings import Config

HEADER_LINES = [
    "/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;",
    "/*!40101 SET NAMES utf8mb4 */;",
    "/*!40014 SET @OLD_UNIQUE_CHECKS=@@UNIQUE_CHECKS, UNIQUE_CHECKS=0 */;",
]

PROLOGUE = "".join(f"{line}\n" for line in HEADER_LINES) + "\n"

T1_SCHEMA = [
    "DROP TABLE IF EXISTS `t1`;",
    "/*!40101 SET @saved_cs_client     = @@character_set_client */;",
    "CREATE TABLE `t1` (",
    "  `id` int NOT NULL,",
    "  PRIMARY KEY (`id`)",
    ") ENGINE=InnoDB;",
]
T1_DATA = [
    "LOCK TABLES `t1` WRITE;",
    "INSERT INTO `t1` VALUES (1),(2);",
    "UNLOCK TABLES;",
]
T2_SCHEMA = [
    "DROP TABLE IF EXISTS `t2`;",
    "CREATE TABLE `t2` (",
    "  `name` varchar(20) DEFAULT NULL",
    ") ENGINE=InnoDB;",
]
T2_DATA = [
    "LOCK TABLES `t2` WRITE;",
    "INSERT INTO `t2` VALUES ('a'),('b -- not a comment');",
    "UNLOCK TABLES;",
]
V1_VIEW = [
    "/*!50001 DROP VIEW IF EXISTS `v1`*/;",
    "/*!50001 CREATE VIEW `v1` AS select `t1`.`id` AS `id` from `t1` */;",
]


def dump_text(*blocks, header=HEADER_LINES, newline="\n"):
    """Assemble a mysqldump-like text with comments and blank lines between blocks."""
    lines = ["-- MySQL dump 10.13  Distrib 8.0.36", "--", "-- Host: localhost    Database: shop", ""]
    lines += list(header)
    for block in blocks:
        lines += ["", "--", "-- Section", "--", ""]
        lines += block
    lines += ["", "-- Dump completed"]
    return newline.join(lines) + newline


def crlf(lines):
    return "".join(f"{line}\r\n" for line in lines)


@pytest.fixture
def write_dump(tmp_path):
    """Write dump text to a file, gzipped when the name ends with .gz."""
    def _write(text, name="dump.sql"):
        path = tmp_path / name
        data = text.encode("utf-8") if isinstance(text, str) else text
        if name.endswith(".gz"):
            path.write_bytes(gzip.compress(data))
        else:
            path.write_bytes(data)
        return path
    return _write


@pytest.fixture
def settings(monkeypatch):
    for var in ("DUMPSPLIT_MAX_LINE_BYTES", "DUMPSPLIT_READ_BUFFER_BYTES",
                "DUMPSPLIT_COMPRESS_LEVEL", "DUMPSPLIT_DIR_MODE"):
        monkeypatch.delenv(var, raising=False)
    return Config()


@pytest.fixture(autouse=True)
def restore_process_state():
    """The CLI reconfigures root logging and the SIGTERM handler."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    sigterm = signal.getsignal(signal.SIGTERM)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    signal.signal(signal.SIGTERM, sigterm)


def read_output(path: Path) -> str:
    data = path.read_bytes()
    if path.name.endswith(".gz"):
        data = gzip.decompress(data)
    return data.decode("utf-8")
