"""
Командная строка клиента ЦРПТ.

Использование:
    python main.py submit document.json --signature-file signature.txt
    python main.py encode document.json --signature-file signature.txt
    python main.py submit document.json --signature-file signature.txt --config /etc/crpt/config.ini

document.json - документ в формате API (ключи doc_id, production_date, products, ...).
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from config import CONFIG_INI_PATH, load_client_settings
from core.encoder import decode_document, encode_envelope
from crpt_api import CrptApi
from utils.exceptions import CrptApiError
from utils.logger_config import setup_logging

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_ERROR = 2


def read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def read_signature(path: str) -> str:
    """Подпись из файла: отрезается только завершающий перевод строки."""
    return read_text(path).rstrip("\r\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Клиент API ЦРПТ: создание документов ввода в оборот")
    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Отправить документ")
    submit.add_argument("document", help="JSON-файл документа")
    submit.add_argument("--signature-file", required=True, help="Файл с открепленной подписью")
    submit.add_argument("--config", default=str(CONFIG_INI_PATH), help="Путь к config.ini")
    submit.add_argument("--token", default=None, help="Bearer токен (по умолчанию из .env)")

    encode = subparsers.add_parser("encode", help="Показать тело запроса без отправки")
    encode.add_argument("document", help="JSON-файл документа")
    encode.add_argument("--signature-file", required=True, help="Файл с открепленной подписью")

    return parser


def run_submit(args: argparse.Namespace) -> int:
    settings = load_client_settings(args.config, auth_token=args.token)
    setup_logging(settings.log_level, settings.log_dir)

    document = decode_document(read_text(args.document))
    signature = read_signature(args.signature_file)

    with CrptApi.from_settings(settings) as api:
        response = api.submit_document(document, signature)

    if response.is_success():
        print(response.document_id)
        return EXIT_OK

    print(f"Документ не принят: code={response.code} "
          f"error_message={response.error_message} description={response.description}",
          file=sys.stderr)
    return EXIT_REJECTED


def run_encode(args: argparse.Namespace) -> int:
    document = decode_document(read_text(args.document))
    signature = read_signature(args.signature_file)
    print(encode_envelope(document, signature).decode("utf-8"))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "submit":
            return run_submit(args)
        return run_encode(args)
    except CrptApiError as e:
        # ошибки запроса уже записаны в лог транспортом
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, UnicodeDecodeError) as e:
        print(f"❌ Ошибка чтения файла: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
