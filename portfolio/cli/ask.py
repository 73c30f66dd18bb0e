# =============================================
# File: portfolio/cli/ask.py
# Purpose: Ask the portfolio assistant from a terminal.
# Usage:
#   python -m portfolio.cli.ask "what are your skills?"
#   python -m portfolio.cli.ask --format markdown --rules "show me your project and contact email"
#   python -m portfolio.cli.ask --chat
# =============================================
from __future__ import annotations
import argparse
import asyncio
import sys

from portfolio.services.chat import ChatWidget
from portfolio.services.responder import Reply, matching_rules, respond
from portfolio.utils.render import render_html, render_markdown


def _format(reply: Reply, fmt: str) -> str:
    if fmt == "markdown":
        return render_markdown(reply)
    if fmt == "html":
        return str(render_html(reply))
    return reply.text


def _print_quick_replies(reply: Reply) -> None:
    if reply.quick_replies:
        labels = "  ".join(f"[{q.label}: /{q.action}]" for q in reply.quick_replies)
        print(labels)


async def _chat_loop(fmt: str, delay_s: float) -> None:
    """
    Interactive session. Lines starting with '/' are quick replies
    (e.g. /skills); an empty line is ignored; Ctrl-D or /quit exits.
    """
    widget = ChatWidget(typing_delay_s=delay_s)
    widget.open()
    while True:
        try:
            line = input("you> ")
        except EOFError:
            print()
            return
        if line.strip() in ("/quit", "/exit"):
            return
        if line.startswith("/"):
            bot = await widget.quick_reply(line[1:])
        else:
            bot = await widget.submit(line)
        if bot is None or bot.reply is None:
            continue
        print("bot> " + _format(bot.reply, fmt).replace("\n", "\n     "))
        _print_quick_replies(bot.reply)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Ask the scripted portfolio assistant.")
    ap.add_argument("question", nargs="*", help="Message text (omit with --chat)")
    ap.add_argument("--format", choices=("text", "markdown", "html"), default="text", help="Output format (default: text)")
    ap.add_argument("--rules", action="store_true", help="Also print every rule the message matches")
    ap.add_argument("--chat", action="store_true", help="Start an interactive session")
    ap.add_argument("--delay", type=float, default=0.0, help="Typing delay in seconds for --chat (default: 0)")
    args = ap.parse_args(argv)

    if args.chat:
        asyncio.run(_chat_loop(args.format, args.delay))
        return

    text = " ".join(args.question).strip()
    if not text:
        print("[WARN] Nothing to ask. Pass a question or use --chat.", file=sys.stderr)
        sys.exit(1)

    reply = respond(text.lower())
    print(_format(reply, args.format))
    _print_quick_replies(reply)
    if args.rules:
        print(f"[rule] {reply.rule}  (matched: {', '.join(matching_rules(text))})")


if __name__ == "__main__":
    main()
