"""CLI entry point for cloze-quizzer.

Usage:
  python -m cloze_quizzer serve [--port PORT] [--host HOST]
  python -m cloze_quizzer generate [FILE] [--offline] [--seed N]
"""
from __future__ import annotations

import asyncio
import json
import random
import sys


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "generate":
        _generate(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, generate")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _positional(args: list[str], flags_with_values: tuple[str, ...]) -> list[str]:
    out = []
    skip = False
    for a in args:
        if skip:
            skip = False
            continue
        if a in flags_with_values:
            skip = True
            continue
        if a.startswith("--"):
            continue
        out.append(a)
    return out


def _serve(args: list[str]):
    import uvicorn

    from cloze_quizzer.config import load_settings

    settings = load_settings()
    port = int(_parse_flag(args, "--port", str(settings.port)))
    host = _parse_flag(args, "--host", settings.host)

    print(f"Quiz server running on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "cloze_quizzer.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _generate(args: list[str]):
    from cloze_quizzer.app import _get_llm
    from cloze_quizzer.config import load_settings
    from cloze_quizzer.errors import QuizError
    from cloze_quizzer.quiz_generator import generate_quiz
    from cloze_quizzer.stopwords import load_stop_words

    files = _positional(args, ("--seed",))
    if files:
        with open(files[0], encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    seed = _parse_flag(args, "--seed", "")
    rng = random.Random(int(seed)) if seed else None

    settings = load_settings()
    stop_words = load_stop_words(settings.stop_words_path)
    llm = None if "--offline" in args else _get_llm(settings)

    try:
        result = asyncio.run(generate_quiz(
            text, llm,
            stop_words=stop_words,
            rng=rng,
            timeout=settings.timeout,
            temperature=settings.temperature,
        ))
    except QuizError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
