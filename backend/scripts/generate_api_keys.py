#!/usr/bin/env python3
"""
生成参与度服务使用的 API Key

用法: python scripts/generate_api_keys.py [count]
"""
import argparse
import os
import sys

# Add the backend directory to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from participation.middleware.auth import generate_api_keys


def main(argv=None):
    parser = argparse.ArgumentParser(description="生成 API Key")
    parser.add_argument(
        "count",
        nargs="?",
        type=int,
        default=3,
        help="生成的 key 数量（默认 3）"
    )
    args = parser.parse_args(argv)
    if args.count < 1:
        parser.error("count must be at least 1")

    api_keys = generate_api_keys(args.count)

    print("Generated API Keys:")
    print("===================")
    for index, key in enumerate(api_keys, start=1):
        print(f"{index}. {key}")

    print("\nEnvironment Variable:")
    print("=====================")
    print(f"API_KEYS={','.join(api_keys)}")

    print("\n请妥善保存这些 key，不要提交到版本库；不同环境使用不同的 key。")
    return api_keys


if __name__ == "__main__":
    main()
