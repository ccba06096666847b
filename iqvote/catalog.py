"""固定カタログ（県コードと政党の初期データ）"""
from typing import Dict, List

from iqvote.db.models.enums import RegionCode

# 表示用ラベル（アラビア語）。キーの並びは seed の投入順でもある
REGION_LABELS: Dict[RegionCode, str] = {
    RegionCode.IQ_BA: "البصرة",
    RegionCode.IQ_AN: "الأنبار",
    RegionCode.IQ_DI: "ديالى",
    RegionCode.IQ_SU: "السليمانية",
    RegionCode.IQ_WA: "واسط",
    RegionCode.IQ_MU: "المثنى",
    RegionCode.IQ_KA: "كربلاء",
    RegionCode.IQ_MA: "ميسان",
    RegionCode.IQ_NA: "النجف",
    RegionCode.IQ_QA: "القادسية",
    RegionCode.IQ_BB: "بابل",
    RegionCode.IQ_BG: "بغداد",
    RegionCode.IQ_DA: "دهوك",
    RegionCode.IQ_DQ: "ذي قار",
    RegionCode.IQ_NI: "نينوى",
    RegionCode.IQ_SD: "صلاح الدين",
    RegionCode.IQ_KI: "كركوك",
    RegionCode.IQ_AR: "أربيل",
}

REGION_CODES: List[str] = [code.value for code in REGION_LABELS]

# 政党名・略称・色は固定。数値列は seed 時に全て 0 にする
PARTIES: List[Dict[str, str]] = [
    {"arabic_name": "ائتلاف الإعمار والتنمية", "abbr": "EDC", "color": "#006d65"},
    {"arabic_name": "دولة القانون", "abbr": "SOL", "color": "#677400"},
    {"arabic_name": "صادقون", "abbr": "SDQ", "color": "#004a46"},
    {"arabic_name": "منظمة بدر", "abbr": "BADR", "color": "#356e02"},
    {"arabic_name": "أشير بالعراق", "abbr": "BSHR", "color": "#a97617"},
    {"arabic_name": "الأساس العراقي", "abbr": "ASI", "color": "#0f4463"},
    {"arabic_name": "الحزب الديمقراطي الكردستاني", "abbr": "PDK", "color": "#ffc22a"},
    {"arabic_name": "الاتحاد الوطني الكردستاني", "abbr": "PUK", "color": "#007e13"},
    {"arabic_name": "التحالف الوطني للتصميم", "abbr": "NDC", "color": "#892f2f"},
    {"arabic_name": "حزب تقدم", "abbr": "TQD", "color": "#f6851d"},
    {"arabic_name": "تحالف عزم", "abbr": "AZM", "color": "#a1b787"},
    {"arabic_name": "تحالف السيادة/تشريع", "abbr": "SIA", "color": "#7c5a1a"},
    {"arabic_name": "ائتلاف قوى الدولة الوطنية", "abbr": "NSFC", "color": "#085798"},
    {"arabic_name": "ائتلاف خدمات", "abbr": "SER", "color": "#0e4a78"},
]


def region_label(code: str) -> str:
    member = RegionCode._value2member_map_.get(code.replace("-", "_"))
    return REGION_LABELS[member] if member is not None else code
