# どこで: `src/plakat/core/__init__.py`。
# 何を: 乱数・ノイズ・配色・空間索引・シーングラフなどの基盤モジュール群。
# なぜ: 出力先に依存しない構図計算の土台を 1 パッケージにまとめるため。
