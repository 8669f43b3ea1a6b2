import json
from typing import Dict, List

from studylog.messaging.values import StudyData, StudyHistory
from studylog.messaging.vocabulary import AudienceType, emotion_label, subject_label
from studylog.utils.helpers import calculate_accuracy


PARENT_SYSTEM_PROMPT = """あなたは愛情深い保護者として、我が子の学習を温かく応援します。
以下の学習結果と学習履歴を見て、心のこもった応援メッセージを3つ提案してください。

【メッセージの特徴】
- 家庭での頑張りを認める温かい表現
- 愛情あふれる親の視点
- 30文字以内、絵文字1-2個
- 子どもが嬉しくなる言葉選び

【必ず守ること】
- 各メッセージには学習データにある実際の科目名と実際の数値（正解数・問題数・正答率・継続日数など）を入れる
- 3つのメッセージはそれぞれ異なる内容・言い回しにする
- 出力は下記のJSONオブジェクトのみ。説明文やコードブロックは付けない

3パターン：
1. 成長や継続を認める励まし系（encouraging）
2. 具体的な成果を褒める系（specific_praise）
3. 気持ちに寄り添う愛情表現系（loving）

出力形式：
{
  "messages": [
    {"message": "メッセージ内容", "emoji": "😊", "type": "encouraging"},
    {"message": "メッセージ内容", "emoji": "🎯", "type": "specific_praise"},
    {"message": "メッセージ内容", "emoji": "💝", "type": "loving"}
  ]
}"""

TEACHER_SYSTEM_PROMPT = """あなたは経験豊富な中学受験指導のプロ教師です。
以下の学習結果と学習履歴を踏まえ、教育的効果の高い応援メッセージを3つ提案してください。

【メッセージの特徴】
- 学習指導の専門的視点
- 具体的な成長ポイントの指摘
- 次への学習意欲を高める表現
- 30文字以内、適度な専門性

【必ず守ること】
- 各メッセージには学習データにある実際の科目名と実際の数値（正解数・問題数・正答率・継続日数など）を入れる
- 3つのメッセージはそれぞれ異なる内容・言い回しにする
- 出力は下記のJSONオブジェクトのみ。説明文やコードブロックは付けない

3パターン：
1. 成長を認める系（encouraging）
2. 学習方法・取り組み姿勢を評価する具体的指導系（instructional）
3. 次の目標への動機付け系（motivational）

出力形式：
{
  "messages": [
    {"message": "メッセージ内容", "emoji": "📈", "type": "encouraging"},
    {"message": "メッセージ内容", "emoji": "🎯", "type": "instructional"},
    {"message": "メッセージ内容", "emoji": "💪", "type": "motivational"}
  ]
}"""

SYSTEM_PROMPTS = {
    AudienceType.PARENT: PARENT_SYSTEM_PROMPT,
    AudienceType.TEACHER: TEACHER_SYSTEM_PROMPT,
}


def build_user_prompt(record: StudyData, history: StudyHistory) -> str:
    """学习数据 + 紧凑序列化的学习履历"""
    accuracy = calculate_accuracy(record.questions_correct, record.questions_total)
    lines = [
        "学習データ:",
        f"- 科目: {subject_label(record.subject)}",
        f"- 正解数: {record.questions_total}問中{record.questions_correct}問",
        f"- 正答率: {accuracy}%",
        f"- 気持ち: {emotion_label(record.emotion)}",
    ]
    if record.comment:
        lines.append(f"- コメント: {record.comment}")
    lines.append(f"- 学習日: {record.date.isoformat()}")

    history_json = json.dumps(
        history.model_dump(mode="json", by_alias=True),
        ensure_ascii=False,
        separators=(",", ":"),
    )
    lines.append(f"学習履歴: {history_json}")
    return "\n".join(lines)


def build_prompt_messages(record: StudyData, history: StudyHistory,
                          audience: AudienceType) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPTS[AudienceType(audience)]},
        {"role": "user", "content": build_user_prompt(record, history)},
    ]
