from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EndpointConfig(BaseModel):
    """フィールド機器の接続先設定

    保存された値をそのまま保持する。空文字も有効な値であり、
    検証は接続時に行われる。

    Attributes:
        plant_id: プラントID
        com_port: シリアルポート名 (例: "COM9", "/dev/ttyUSB0")
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"plantId": "Plant-7", "comPort": "COM9"}},
    )

    plant_id: str = Field(default="", description="プラントID")
    com_port: str = Field(default="", description="シリアルポート名")
