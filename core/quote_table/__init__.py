# core/quote_table/__init__.py

"""
Quote table converter core package.

- models.py    : Pydantic モデル定義
- errors.py    : DecodeError
- decoders.py  : CSV テキスト -> RawRow 列（header / positional の 2 実装）
- transform.py : RawRow 列 -> QuoteRecord 列 + タグ一覧
- service.py   : 複数ソースの結合・変換・レスポンス整形
- store.py     : 変換結果の JSON 保存先
"""
