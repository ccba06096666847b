from enum import Enum

# 県（محافظة）コード。DB には常にこのアンダースコア形式で保存する
class RegionCode(str, Enum):
    IQ_BA = "IQ_BA"
    IQ_AN = "IQ_AN"
    IQ_DI = "IQ_DI"
    IQ_SU = "IQ_SU"
    IQ_WA = "IQ_WA"
    IQ_MU = "IQ_MU"
    IQ_KA = "IQ_KA"
    IQ_MA = "IQ_MA"
    IQ_NA = "IQ_NA"
    IQ_QA = "IQ_QA"
    IQ_BB = "IQ_BB"
    IQ_BG = "IQ_BG"
    IQ_DA = "IQ_DA"
    IQ_DQ = "IQ_DQ"
    IQ_NI = "IQ_NI"
    IQ_SD = "IQ_SD"
    IQ_KI = "IQ_KI"
    IQ_AR = "IQ_AR"
