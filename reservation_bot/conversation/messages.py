"""
Bilingual (English / Indonesian) message catalog for the booking assistant.

Templates use ``{placeholder}`` substitution. An unknown message id renders
as the id itself so a missing translation is visible instead of fatal.
"""

import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Language(str, Enum):
    EN = "en"
    ID = "id"


LANGUAGE_MENU = (
    "Please choose your language / Silakan pilih bahasa Anda:\n\n"
    "1️⃣ English\n"
    "2️⃣ Bahasa Indonesia\n\n"
    "Reply 1 or 2 / Balas 1 atau 2"
)

MESSAGES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "language_menu": LANGUAGE_MENU,
        "language_invalid": "Please reply 1 for English or 2 for Bahasa Indonesia.\n\n" + LANGUAGE_MENU,
        "greeting": (
            "Hello! 👋 Welcome to {hotel_name}. I'm here to help you manage your booking. "
            "You can change your booking date and time.\n\n"
            "To get started, please send your 6-character booking ID (like BUP001)."
        ),
        "restart": "Sure! Let's start over. Please send your 6-character booking ID:",
        "invalid_code_format": (
            "Please enter a valid 6-character booking ID (letters and numbers only, like BUP001)."
        ),
        "booking_not_found": (
            "❌ Sorry, I couldn't find a booking with ID {booking_code}. "
            "Please check your booking ID and try again."
        ),
        "lookup_failed": "❌ Sorry, I couldn't look up your booking right now. Please try again in a moment.",
        "booking_summary": (
            "✅ Found your booking! Here are the details:\n\n"
            "📋 *Booking Information*\n"
            "🎫 Booking ID: {booking_code}\n"
            "👤 Name: {customer_name}\n"
            "🎉 Event: {event_name}\n"
            "📅 Date: {booking_date}\n"
            "⏰ Time: {booking_time}\n"
            "👥 Guests: {adults} Adults, {children} Children\n"
            "📊 Status: {status}\n\n"
            "Please choose an option:\n"
            "1️⃣ Continue - Proceed to edit this booking\n"
            "2️⃣ Back - Start over with a different booking ID\n\n"
            "Type 1 or 2:"
        ),
        "show_info_invalid": "Please enter 1 to continue or 2 to go back.",
        "booking_cancelled": (
            "Cancelled bookings cannot be modified. "
            "Please send another booking ID if you have one:"
        ),
        "ask_email": (
            "🔐 For security purposes, I need to verify your identity with the "
            "email address and phone number used for this booking.\n\n"
            "Please enter your email address first:"
        ),
        "invalid_email": "Please enter a valid email address.",
        "ask_phone": "📧 Email received. Now please enter your phone number:",
        "verification_failed": (
            "❌ The email or phone number doesn't match our records. "
            "Let's try again.\n\nPlease enter your email address:"
        ),
        "edit_menu": (
            "What would you like to change?\n"
            "1️⃣ Date - Change booking date\n"
            "2️⃣ Time - Change booking time\n"
            "3️⃣ Both - Change both date and time\n"
            "4️⃣ Cancel - Exit without changes\n\n"
            "Type 1, 2, 3, or 4:"
        ),
        "verification_success": "✅ Verification successful! You can now edit your booking.",
        "edit_options_invalid": "Please enter 1 for Date, 2 for Time, 3 for Both, or 4 for Cancel.",
        "current_date": "📅 Current date: {booking_date}",
        "current_time": "⏰ Current time: {booking_time}",
        "event_window": "📅 Event \"{event_name}\" is available from {start_date} to {end_date}.",
        "date_prompt": "Please enter the new date (DD-MM-YYYY format, e.g., 25-12-2025):",
        "date_prompt_in_window": (
            "Please enter the new date within this range (DD-MM-YYYY format, e.g., 25-12-2025):"
        ),
        "time_prompt": "Please enter the new time (HH:MM format, e.g., 14:30):",
        "both_intro": "Let's start with the date.",
        "invalid_date_format": "Please enter a valid date in DD-MM-YYYY format (e.g., 25-12-2025).",
        "date_past": (
            "❌ The date {date} has already passed. Please choose a future date.\n\n"
            "Please enter a valid date (DD-MM-YYYY format):"
        ),
        "date_outside_event": (
            "❌ The date {date} is not within the event period. The event \"{event_name}\" "
            "runs from {start_date} to {end_date}. Please choose a date within this range.\n\n"
            "Please enter a valid date (DD-MM-YYYY format):"
        ),
        "date_too_far": (
            "❌ The date {date} is too far in the future. "
            "Please choose a date within the next {years} years.\n\n"
            "Please enter a valid date (DD-MM-YYYY format):"
        ),
        "date_caveat": (
            "⚠️ Could not verify the event date range, but the date {date} appears valid."
        ),
        "date_set_chained": "📅 Date set: {new_date}\n\nNow please enter the new time (HH:MM format):",
        "invalid_time": "Please enter a valid time in HH:MM format (e.g., 14:30).",
        "date_set_continue": (
            "📅 New date set: {new_date}\n\n"
            "Would you like to change anything else?\n"
            "1️⃣ Change time as well\n"
            "2️⃣ Confirm this change only\n"
            "3️⃣ Cancel changes\n\n"
            "Type 1, 2, or 3:"
        ),
        "time_set_continue": (
            "⏰ New time set: {new_time}\n\n"
            "Would you like to change anything else?\n"
            "1️⃣ Change date as well\n"
            "2️⃣ Confirm this change only\n"
            "3️⃣ Cancel changes\n\n"
            "Type 1, 2, or 3:"
        ),
        "both_set_continue": (
            "⏰ Time set: {new_time}\n\n"
            "🔄 Your new date is {new_date} at {new_time}.\n"
            "1️⃣ or 2️⃣ Review and confirm these changes\n"
            "3️⃣ Cancel all changes\n\n"
            "Type 1, 2, or 3:"
        ),
        "continue_invalid": "Please enter 1, 2, or 3 to choose your option.",
        "confirm_summary": (
            "🔄 Ready to update booking {booking_code}:\n"
            "{change_lines}\n\n"
            "1️⃣ Confirm changes\n"
            "2️⃣ Cancel changes\n\n"
            "Type 1 or 2:"
        ),
        "new_date_line": "📅 New date: {new_date}",
        "new_time_line": "⏰ New time: {new_time}",
        "confirm_invalid": "Please enter 1 to confirm or 2 to cancel.",
        "update_success": (
            "✅ Your booking has been successfully updated!\n\n"
            "📋 *Updated Booking Details*\n"
            "🎫 Booking ID: {booking_code}\n"
            "📅 Date: {booking_date}\n"
            "⏰ Time: {booking_time}\n\n"
            "Would you like to make any other changes?\n"
            "1️⃣ Yes - Make more changes\n"
            "2️⃣ No - I'm done\n\n"
            "Type 1 or 2:"
        ),
        "update_failed": (
            "❌ Sorry, there was an error updating your booking. "
            "Please try again later or contact support."
        ),
        "changes_cancelled": "Changes cancelled. Your original booking remains unchanged.",
        "no_changes": "No changes made. Have a great day! 👋",
        "more_changes_prompt": "Great! What would you like to change?",
        "more_changes_invalid": "Please enter 1 to make more changes or 2 if you're done.",
        "goodbye": "Perfect! Your booking is up to date. Thank you for choosing {hotel_name}! 🎉",
        "session_completed": (
            "This chat session is complete. Type \"menu\" to manage another booking. "
            "Have a great day! 👋"
        ),
        "text_only": "I can only read text messages. Please type your reply.",
        "not_specified": "Not specified",
    },
    Language.ID: {
        "language_menu": LANGUAGE_MENU,
        "language_invalid": "Balas 1 untuk English atau 2 untuk Bahasa Indonesia.\n\n" + LANGUAGE_MENU,
        "greeting": (
            "Halo! 👋 Selamat datang di {hotel_name}. Saya siap membantu Anda mengelola booking. "
            "Anda dapat mengubah tanggal dan waktu booking.\n\n"
            "Untuk memulai, silakan kirim ID booking 6 karakter Anda (contoh: BUP001)."
        ),
        "restart": "Baik! Mari mulai lagi. Silakan kirim ID booking 6 karakter Anda:",
        "invalid_code_format": (
            "Silakan masukkan ID booking 6 karakter yang valid (huruf dan angka saja, contoh: BUP001)."
        ),
        "booking_not_found": (
            "❌ Maaf, booking dengan ID {booking_code} tidak ditemukan. "
            "Silakan periksa kembali ID booking Anda dan coba lagi."
        ),
        "lookup_failed": "❌ Maaf, booking Anda tidak dapat dicari saat ini. Silakan coba lagi sebentar lagi.",
        "booking_summary": (
            "✅ Booking Anda ditemukan! Berikut detailnya:\n\n"
            "📋 *Informasi Booking*\n"
            "🎫 ID Booking: {booking_code}\n"
            "👤 Nama: {customer_name}\n"
            "🎉 Event: {event_name}\n"
            "📅 Tanggal: {booking_date}\n"
            "⏰ Waktu: {booking_time}\n"
            "👥 Tamu: {adults} Dewasa, {children} Anak\n"
            "📊 Status: {status}\n\n"
            "Silakan pilih opsi:\n"
            "1️⃣ Lanjut - Ubah booking ini\n"
            "2️⃣ Kembali - Mulai lagi dengan ID booking lain\n\n"
            "Ketik 1 atau 2:"
        ),
        "show_info_invalid": "Ketik 1 untuk lanjut atau 2 untuk kembali.",
        "booking_cancelled": (
            "Booking yang dibatalkan tidak dapat diubah. "
            "Silakan kirim ID booking lain jika ada:"
        ),
        "ask_email": (
            "🔐 Demi keamanan, saya perlu memverifikasi identitas Anda dengan "
            "alamat email dan nomor telepon yang digunakan untuk booking ini.\n\n"
            "Silakan masukkan alamat email Anda terlebih dahulu:"
        ),
        "invalid_email": "Silakan masukkan alamat email yang valid.",
        "ask_phone": "📧 Email diterima. Sekarang silakan masukkan nomor telepon Anda:",
        "verification_failed": (
            "❌ Email atau nomor telepon tidak sesuai dengan data kami. "
            "Mari coba lagi.\n\nSilakan masukkan alamat email Anda:"
        ),
        "edit_menu": (
            "Apa yang ingin Anda ubah?\n"
            "1️⃣ Tanggal - Ubah tanggal booking\n"
            "2️⃣ Waktu - Ubah waktu booking\n"
            "3️⃣ Keduanya - Ubah tanggal dan waktu\n"
            "4️⃣ Batal - Keluar tanpa perubahan\n\n"
            "Ketik 1, 2, 3, atau 4:"
        ),
        "verification_success": "✅ Verifikasi berhasil! Sekarang Anda dapat mengubah booking.",
        "edit_options_invalid": "Ketik 1 untuk Tanggal, 2 untuk Waktu, 3 untuk Keduanya, atau 4 untuk Batal.",
        "current_date": "📅 Tanggal saat ini: {booking_date}",
        "current_time": "⏰ Waktu saat ini: {booking_time}",
        "event_window": "📅 Event \"{event_name}\" tersedia dari {start_date} sampai {end_date}.",
        "date_prompt": "Silakan masukkan tanggal baru (format DD-MM-YYYY, contoh: 25-12-2025):",
        "date_prompt_in_window": (
            "Silakan masukkan tanggal baru dalam rentang ini (format DD-MM-YYYY, contoh: 25-12-2025):"
        ),
        "time_prompt": "Silakan masukkan waktu baru (format HH:MM, contoh: 14:30):",
        "both_intro": "Kita mulai dengan tanggal.",
        "invalid_date_format": "Silakan masukkan tanggal yang valid dengan format DD-MM-YYYY (contoh: 25-12-2025).",
        "date_past": (
            "❌ Tanggal {date} sudah lewat. Silakan pilih tanggal yang akan datang.\n\n"
            "Silakan masukkan tanggal yang valid (format DD-MM-YYYY):"
        ),
        "date_outside_event": (
            "❌ Tanggal {date} tidak dalam periode event. Event \"{event_name}\" "
            "berlangsung dari {start_date} sampai {end_date}. Silakan pilih tanggal dalam rentang ini.\n\n"
            "Silakan masukkan tanggal yang valid (format DD-MM-YYYY):"
        ),
        "date_too_far": (
            "❌ Tanggal {date} terlalu jauh di masa depan. "
            "Silakan pilih tanggal dalam {years} tahun ke depan.\n\n"
            "Silakan masukkan tanggal yang valid (format DD-MM-YYYY):"
        ),
        "date_caveat": (
            "⚠️ Periode event tidak dapat diverifikasi, tetapi tanggal {date} tampaknya valid."
        ),
        "date_set_chained": "📅 Tanggal diatur: {new_date}\n\nSekarang silakan masukkan waktu baru (format HH:MM):",
        "invalid_time": "Silakan masukkan waktu yang valid dengan format HH:MM (contoh: 14:30).",
        "date_set_continue": (
            "📅 Tanggal baru diatur: {new_date}\n\n"
            "Apakah ada yang ingin Anda ubah lagi?\n"
            "1️⃣ Ubah waktu juga\n"
            "2️⃣ Konfirmasi perubahan ini saja\n"
            "3️⃣ Batalkan perubahan\n\n"
            "Ketik 1, 2, atau 3:"
        ),
        "time_set_continue": (
            "⏰ Waktu baru diatur: {new_time}\n\n"
            "Apakah ada yang ingin Anda ubah lagi?\n"
            "1️⃣ Ubah tanggal juga\n"
            "2️⃣ Konfirmasi perubahan ini saja\n"
            "3️⃣ Batalkan perubahan\n\n"
            "Ketik 1, 2, atau 3:"
        ),
        "both_set_continue": (
            "⏰ Waktu diatur: {new_time}\n\n"
            "🔄 Tanggal baru Anda {new_date} pukul {new_time}.\n"
            "1️⃣ atau 2️⃣ Tinjau dan konfirmasi perubahan\n"
            "3️⃣ Batalkan semua perubahan\n\n"
            "Ketik 1, 2, atau 3:"
        ),
        "continue_invalid": "Silakan ketik 1, 2, atau 3 untuk memilih.",
        "confirm_summary": (
            "🔄 Siap memperbarui booking {booking_code}:\n"
            "{change_lines}\n\n"
            "1️⃣ Konfirmasi perubahan\n"
            "2️⃣ Batalkan perubahan\n\n"
            "Ketik 1 atau 2:"
        ),
        "new_date_line": "📅 Tanggal baru: {new_date}",
        "new_time_line": "⏰ Waktu baru: {new_time}",
        "confirm_invalid": "Ketik 1 untuk konfirmasi atau 2 untuk batal.",
        "update_success": (
            "✅ Booking Anda berhasil diperbarui!\n\n"
            "📋 *Detail Booking Terbaru*\n"
            "🎫 ID Booking: {booking_code}\n"
            "📅 Tanggal: {booking_date}\n"
            "⏰ Waktu: {booking_time}\n\n"
            "Apakah ada perubahan lain?\n"
            "1️⃣ Ya - Ubah lagi\n"
            "2️⃣ Tidak - Sudah selesai\n\n"
            "Ketik 1 atau 2:"
        ),
        "update_failed": (
            "❌ Maaf, terjadi kesalahan saat memperbarui booking Anda. "
            "Silakan coba lagi nanti atau hubungi kami."
        ),
        "changes_cancelled": "Perubahan dibatalkan. Booking Anda tetap seperti semula.",
        "no_changes": "Tidak ada perubahan. Semoga hari Anda menyenangkan! 👋",
        "more_changes_prompt": "Baik! Apa yang ingin Anda ubah?",
        "more_changes_invalid": "Ketik 1 untuk ubah lagi atau 2 jika sudah selesai.",
        "goodbye": "Sempurna! Booking Anda sudah diperbarui. Terima kasih telah memilih {hotel_name}! 🎉",
        "session_completed": (
            "Sesi chat ini sudah selesai. Ketik \"menu\" untuk mengelola booking lain. "
            "Semoga hari Anda menyenangkan! 👋"
        ),
        "text_only": "Saya hanya dapat membaca pesan teks. Silakan ketik balasan Anda.",
        "not_specified": "Tidak ditentukan",
    },
}


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(key: str, language: Language = Language.EN, **values: Any) -> str:
    """Render a message template in the given language."""
    template = MESSAGES.get(Language(language), MESSAGES[Language.EN]).get(key)
    if template is None:
        logger.warning("Unknown message id: %s", key)
        return key
    return template.format_map(_KeepMissing(values))
