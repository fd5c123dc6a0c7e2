# medal_compass/models/__init__.py
# __init__.py に from .medal import Medal と書くことで，models/medal.pyファイルの中に定義されているMedalクラスを，modelsパッケージの直下にあるかのように昇格させることができます．
# このおかげでcrudなどにおいて，from medal_compass.models import Medal と書ける．
from .medal import Medal
from .report import MedalReport
from .collection import MedalCollection
