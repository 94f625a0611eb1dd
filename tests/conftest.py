"""Test fixtures and utilities."""

import io
import random
import struct
import zipfile
from pathlib import Path

import pytest

from request_intake.config import Config

# Assessment request form as delivered inside the ZIP (older combined-label layout)
SAMPLE_REQUEST_TXT = """[査定依頼日時・査定依頼番号] 2024年5月1日10時30分(123456)
商品：査定
ブランド名：トヨタ
車種名：プリウス
年式：2020
グレード：S
ボディタイプ・カテゴリ：ハッチバック
車体色・ドア数：ホワイトパールクリスタルシャイン／5ドア
ハンドル：右
燃料：ハイブリッド
ミッション：AT
駆動方式：FF
排気量：1800cc
走行距離：20000km
車検時期：2025年3月
事故歴：なし
クルマの状態・ラベル：良好
売却希望時期・ラベル：3か月以内
型式・装備：DAA-ZVW50, ナビ/ETC
その他オプション：サンルーフ
ご依頼者名：山田太郎様
ご依頼者カナ名：ヤマダタロウ様
郵便番号：123-4567
ご住所：東京都渋谷区1-2-3
メールアドレス：test@example.com
電話番号：090-1234-5678
その他の連絡先：03-1111-2222
連絡可能時間帯：午前中
"""

# Newer layout: separate labels, bullet markers, full-width stamp parentheses
SAMPLE_REQUEST_TXT_SEPARATE = """[査定依頼日時・査定依頼番号]
2024年12月31日23時05分（987654）
・メーカー名：ホンダ
・車名：フィット
・カラー：ブルー
・ドア数：５ドア
・型式：DBA-GK3
・装備：ナビ
・氏名：佐藤花子 様
・住所：京都府京都市中京区1-1
"""


def build_zip(members: dict[str, bytes], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build an in-memory ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def patch_central_directory(data: bytes, method: int | None = None, flags: int | None = None) -> bytes:
    """Rewrite the method/flags of every central directory record (and local header)."""
    patched = bytearray(data)
    for signature, flags_at, method_at in ((b"PK\x01\x02", 8, 10), (b"PK\x03\x04", 6, 8)):
        pos = patched.find(signature)
        while pos >= 0:
            if flags is not None:
                struct.pack_into("<H", patched, pos + flags_at, flags)
            if method is not None:
                struct.pack_into("<H", patched, pos + method_at, method)
            pos = patched.find(signature, pos + 4)
    return bytes(patched)


@pytest.fixture
def sample_request_text() -> str:
    """Sample request form text."""
    return SAMPLE_REQUEST_TXT


@pytest.fixture
def sample_request_text_separate() -> str:
    """Sample request form using separate labels."""
    return SAMPLE_REQUEST_TXT_SEPARATE


@pytest.fixture
def sample_request_zip() -> bytes:
    """ZIP with one Shift_JIS request form and one unrelated member."""
    return build_zip(
        {
            "request_123456.txt": SAMPLE_REQUEST_TXT.encode("cp932"),
            "photo.jpg": b"\xff\xd8\xff\xe0 not really a jpeg",
        }
    )


@pytest.fixture
def deflate64_zip() -> bytes:
    """ZIP whose central directory claims Deflate64 (method 9)."""
    return patch_central_directory(
        build_zip({"request.txt": b"x"}, compression=zipfile.ZIP_STORED), method=9
    )


@pytest.fixture
def corrupt_member_zip() -> bytes:
    """Deflated ZIP whose central directory is intact but whose member data is garbage."""
    data = bytearray(build_zip({"a.txt": random.Random(0).randbytes(4000)}))
    # Local header (30 bytes) plus the 5-byte name; overwrite the start of the deflate stream
    data[36:44] = b"\xff" * 8
    return bytes(data)


@pytest.fixture
def empty_zip() -> bytes:
    """ZIP with an End-Of-Central-Directory record and nothing else."""
    return build_zip({})


@pytest.fixture
def default_config() -> Config:
    """Configuration with every default."""
    return Config()


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Path for a temporary config file."""
    return tmp_path / "config.yaml"


@pytest.fixture
def make_zip():
    """Factory fixture: build_zip(members, compression)."""
    return build_zip


@pytest.fixture
def patch_zip():
    """Factory fixture: patch_central_directory(data, method, flags)."""
    return patch_central_directory
