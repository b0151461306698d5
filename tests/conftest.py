# tests/conftest.py
"""
テスト全体の共通設定。
ウィジェットのテストはディスプレイのない環境でも動作するよう、offscreenプラットフォームを使用します。
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
