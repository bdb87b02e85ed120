"""binsight — 拍照识别可回收材料的分析服务。"""

__version__ = "0.1.0"
