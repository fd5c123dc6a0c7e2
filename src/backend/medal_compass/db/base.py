# medal_compass/db/base.py
# Alembicやscripts/init_db.pyが全テーブルを認識できるよう，Baseと全モデルをここでまとめてimportする．
from medal_compass.db.base_class import Base  # noqa: F401
from medal_compass.models import Medal, MedalReport, MedalCollection  # noqa: F401
