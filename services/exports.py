import io

import pandas as pd

from models import User, House, Booking, Payment

STATUS_LABELS = {"pending": "Pending", "completed": "Completed", "failed": "Failed", "refunded": "Refunded"}


def bookings_workbook():
    """Summary, bookings and houses sheets as an in-memory .xlsx file."""
    df_summary = pd.DataFrame([
        {"Item": "Owners", "Count": User.query.filter_by(role="owner").count()},
        {"Item": "Tenants", "Count": User.query.filter_by(role="tenant").count()},
        {"Item": "Houses", "Count": House.query.count()},
        {"Item": "Restricted houses", "Count": House.query.filter_by(moderation_status="restricted").count()},
        {"Item": "Bookings", "Count": Booking.query.count()},
        {"Item": "Pending payments", "Count": Payment.query.filter_by(status="pending").count()},
    ])

    booking_rows = []
    for b in Booking.query.order_by(Booking.start_date.desc()).all():
        p = b.payment
        booking_rows.append({
            "Booking ID": b.id,
            "House": b.house.room_name,
            "Address": b.house.address,
            "Owner": b.house.owner_email,
            "Tenant": b.tenant_email,
            "Start": b.start_date.strftime("%d/%m/%Y"),
            "End": b.end_date.strftime("%d/%m/%Y"),
            "Total": float(b.total_price or 0),
            "Payment method": (p.method or "") if p else "",
            "Payment status": STATUS_LABELS.get(p.status, p.status) if p else "",
        })
    df_bookings = pd.DataFrame(booking_rows)

    df_houses = pd.DataFrame([{
        "House ID": h.id,
        "Name": h.room_name,
        "Type": h.room_type,
        "Owner": h.owner_email,
        "Price/day": float(h.price or 0),
        "Window start": h.start_date.strftime("%d/%m/%Y") if h.start_date else "",
        "Window end": h.end_date.strftime("%d/%m/%Y") if h.end_date else "",
        "Status": h.status,
    } for h in House.query.all()])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df_summary.to_excel(writer, index=False, sheet_name="Summary")
        df_bookings.to_excel(writer, index=False, sheet_name="Bookings")
        df_houses.to_excel(writer, index=False, sheet_name="Houses")

        workbook = writer.book
        worksheet = writer.sheets["Summary"]
        header_format = workbook.add_format({"bold": True, "bg_color": "#CCE5FF", "border": 1})
        for col_num, value in enumerate(df_summary.columns.values):
            worksheet.write(0, col_num, value, header_format)

    output.seek(0)
    return output
