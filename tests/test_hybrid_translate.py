from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

import hybrid_translate
from models.quality_models import QualityMetrics, QualityScore
from models.translation_models import TranslationOutcome

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path


class StubTransManager:
    """Records calls made by ``run`` and answers with tagged text."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, str, str | None]] = []

    def get_supported_languages(self) -> set[str]:
        return {"ja", "en", "es"}

    async def translate_detailed(self, text: str, tgt_lang: str, src_lang: str | None = None) -> TranslationOutcome:
        self.calls.append(("single", text, tgt_lang, src_lang))
        return TranslationOutcome(text=f"{tgt_lang}:{text}", provider="nllb")

    async def translate_batch(self, texts: Sequence[str], tgt_lang: str, src_lang: str | None = None) -> list[str]:
        self.calls.append(("batch", list(texts), tgt_lang, src_lang))
        return [f"{tgt_lang}:{text}" if text else "" for text in texts]

    async def translate_bundle(
        self, bundle: Mapping[str, Any], tgt_lang: str, src_lang: str | None = None
    ) -> dict[str, Any]:
        self.calls.append(("bundle", dict(bundle), tgt_lang, src_lang))
        return {key: f"{tgt_lang}:{value}" for key, value in bundle.items()}


def test_parse_arguments_single_text() -> None:
    args = hybrid_translate.parse_arguments(["--to", "ja", "-f", "en", "Hello,", "world"])

    assert args.text == ["Hello,", "world"]
    assert args.tgt_lang == "ja"
    assert args.src_lang == "en"
    assert args.config == "translator.ini"
    assert args.detail is False


def test_parse_arguments_languages_needs_no_target() -> None:
    args = hybrid_translate.parse_arguments(["--languages"])

    assert args.languages is True
    assert args.tgt_lang is None


@pytest.mark.parametrize(
    "argv",
    [
        ["Hello"],
        ["--to", "ja"],
        ["--to", "ja", "--batch", "a.txt", "--bundle", "b.json"],
    ],
)
def test_parse_arguments_rejects_incomplete_requests(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        hybrid_translate.parse_arguments(argv)

    assert exc_info.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_format_outcome() -> None:
    score = QualityScore(score=0.9, metrics=QualityMetrics(1.0, 1.0, 1.0, 0.9, 0.5), passes=True, issues=())
    fresh = TranslationOutcome(text="Hola", provider="nllb", quality=score)
    cached = TranslationOutcome(text="Hola", provider="nllb", from_cache=True)

    assert hybrid_translate.format_outcome(fresh, detail=False) == "Hola"
    assert hybrid_translate.format_outcome(fresh, detail=True) == "Hola\t[nllb, quality 0.90]"
    assert hybrid_translate.format_outcome(cached, detail=True) == "Hola\t[nllb, cached]"


@pytest.mark.asyncio
async def test_run_single_text(capsys: pytest.CaptureFixture[str]) -> None:
    manager = StubTransManager()
    args = hybrid_translate.parse_arguments(["--to", "es", "Hello", "world"])

    await hybrid_translate.run(args, manager)  # type: ignore[arg-type]

    assert manager.calls == [("single", "Hello world", "es", None)]
    assert capsys.readouterr().out == "es:Hello world\n"


@pytest.mark.asyncio
async def test_run_languages(capsys: pytest.CaptureFixture[str]) -> None:
    args = hybrid_translate.parse_arguments(["--languages"])

    await hybrid_translate.run(args, StubTransManager())  # type: ignore[arg-type]

    assert capsys.readouterr().out == "en es ja\n"


@pytest.mark.asyncio
async def test_run_batch_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    batch_file = tmp_path / "lines.txt"
    batch_file.write_text("Hello\n\nBye\n", encoding="utf-8")
    args = hybrid_translate.parse_arguments(["--to", "es", "--batch", str(batch_file)])

    await hybrid_translate.run(args, StubTransManager())  # type: ignore[arg-type]

    assert capsys.readouterr().out == "es:Hello\n\nes:Bye\n"


@pytest.mark.asyncio
async def test_run_bundle_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bundle_file = tmp_path / "strings.json"
    bundle_file.write_text(json.dumps({"title": "Hello"}), encoding="utf-8")
    args = hybrid_translate.parse_arguments(["--to", "es", "--bundle", str(bundle_file)])

    await hybrid_translate.run(args, StubTransManager())  # type: ignore[arg-type]

    assert json.loads(capsys.readouterr().out) == {"title": "es:Hello"}


@pytest.mark.asyncio
async def test_run_rejects_non_object_bundle(tmp_path: Path) -> None:
    bundle_file = tmp_path / "strings.json"
    bundle_file.write_text("[1, 2]", encoding="utf-8")
    args = hybrid_translate.parse_arguments(["--to", "es", "--bundle", str(bundle_file)])

    with pytest.raises(ValueError, match="must contain a JSON object"):
        await hybrid_translate.run(args, StubTransManager())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_main_reports_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code: int = await hybrid_translate.main(["--config", str(tmp_path / "missing.ini"), "--to", "es", "Hello"])

    assert code == 1
    assert "Failed to load configuration file" in capsys.readouterr().err
