"""Urgency classification and prompt templating for cat-care questions."""

from collections.abc import Iterable

from purrpal.entities import UrgencyLevel

BASE_INSTRUCTIONS = """Kamu adalah PurrPal AI, asisten virtual yang membantu pemilik kucing di Indonesia.
Kamu memiliki pengetahuan tentang:
- Perawatan kucing dan kesehatan dasar
- Nutrisi dan makanan kucing
- Perilaku kucing
- Tips perawatan harian
- Tanda-tanda kucing sakit
- Kapan harus ke dokter hewan

Gaya jawaban:
1. Buka dengan kalimat yang empatik dan menenangkan.
2. Berikan langkah-langkah praktis yang jelas dan mudah diikuti.
3. Jika kondisinya tidak ringan, jelaskan kapan dan mengapa harus ke dokter hewan.
4. Tutup dengan kalimat yang hangat dan suportif.

Jawab dengan ramah, informatif, dan mudah dipahami dalam Bahasa Indonesia."""

EMERGENCY_BLOCK = """PERHATIAN - KONDISI DARURAT:
Pesan pengguna menunjukkan tanda-tanda kondisi gawat darurat.
- Di awal jawaban, minta pengguna SEGERA membawa kucing ke dokter hewan atau klinik darurat terdekat.
- Tegaskan bahwa kondisi ini tidak boleh ditunda atau ditangani sendiri di rumah.
- Berikan hanya pertolongan pertama yang aman selama perjalanan ke dokter hewan."""

SERIOUS_BLOCK = """PERHATIAN - KONDISI SERIUS:
Pesan pengguna menunjukkan gejala yang perlu diperhatikan.
- Sarankan pemeriksaan ke dokter hewan dalam 24-48 jam.
- Jelaskan gejala apa saja yang perlu dipantau dan tanda-tanda yang mengharuskan ke dokter hewan lebih cepat."""

_URGENCY_BLOCKS = {
    UrgencyLevel.EMERGENCY: EMERGENCY_BLOCK,
    UrgencyLevel.SERIOUS: SERIOUS_BLOCK,
}


def _matches_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword.lower() in text for keyword in keywords)


def classify_urgency(
    text: str,
    emergency_keywords: Iterable[str],
    serious_keywords: Iterable[str],
) -> UrgencyLevel:
    """Assign a severity tier by case-insensitive keyword containment.

    Emergency keywords win over serious ones when both match.
    """
    lowered = text.lower()
    if _matches_any(lowered, emergency_keywords):
        return UrgencyLevel.EMERGENCY
    if _matches_any(lowered, serious_keywords):
        return UrgencyLevel.SERIOUS
    return UrgencyLevel.NORMAL


class PromptBuilder:
    """Renders the instruction prompt sent verbatim to the model."""

    def build_prompt(self, text: str, urgency: UrgencyLevel = UrgencyLevel.NORMAL) -> str:
        """Build the prompt for a fresh question.

        Args:
            text: Sanitized user message
            urgency: Urgency classification of the message

        Returns:
            The prompt string
        """
        sections = [BASE_INSTRUCTIONS]
        if urgency in _URGENCY_BLOCKS:
            sections.append(_URGENCY_BLOCKS[urgency])
        sections.append(f"Pertanyaan pengguna: {text}\n\nJawaban:")
        return "\n\n".join(sections)

    def build_follow_up(
        self,
        previous_response: str,
        text: str,
        urgency: UrgencyLevel = UrgencyLevel.NORMAL,
    ) -> str:
        """Build a prompt that continues the previous exchange.

        Args:
            previous_response: The assistant's last answer in this session
            text: Sanitized follow-up message
            urgency: Urgency classification of the follow-up message

        Returns:
            The prompt string
        """
        sections = [
            BASE_INSTRUCTIONS,
            f"Konteks sebelumnya (jawaban terakhirmu kepada pengguna ini):\n{previous_response}",
            "Ini adalah pertanyaan lanjutan. Jawab dengan tetap nyambung dengan konteks "
            "sebelumnya tanpa mengulang seluruh penjelasan.",
        ]
        if urgency in _URGENCY_BLOCKS:
            sections.append(_URGENCY_BLOCKS[urgency])
        sections.append(f"Pertanyaan lanjutan: {text}\n\nJawaban:")
        return "\n\n".join(sections)
