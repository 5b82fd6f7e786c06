from __future__ import annotations

import csv
import io

import openpyxl

# Literal CSV documents handed to operators. The header rows are the
# column contract the importers accept; keep them stable.
TEMPLATES = {
    "academic_terms": (
        "Name,Start Date,End Date,Academic Year,Status\n"
        "Fall 2024,15-08-2024,20-12-2024,2024-25,active\n"
        "Spring 2025,15-01-2025,15-05-2025,2024-25,upcoming\n"
        "Summer 2025,01-06-2025,31-07-2025,2024-25,upcoming"
    ),
    "departments": (
        "Code,Name,Description,Head of Department Email\n"
        "CSE,Computer Science and Engineering,Department of Computer Science and Engineering,hod.cse@university.edu\n"
        "ECE,Electronics and Communication Engineering,Department of Electronics and Communication,hod.ece@university.edu"
    ),
    "programs": (
        "Code,Name,Department Code,Duration Years,Total Semesters,Description\n"
        "CSE-BTECH,B.Tech Computer Science and Engineering,CSE,4,8,Four year undergraduate program\n"
        "ECE-BTECH,B.Tech Electronics and Communication,ECE,4,8,Four year undergraduate program"
    ),
    "classrooms": (
        "Room Code,Building,Floor,Capacity,Type,Equipment,Is Available\n"
        'C101,Main Building,1,50,Class,"Projector;Whiteboard;AC",true\n'
        'LB1,Lab Building,1,30,Lab,"Computers;Projector;AC",true\n'
        'LH201,Main Building,2,200,Lecture Hall,"Projector;Audio System;AC",true'
    ),
    "faculty": (
        "Name,Employee ID,Email,Department Code,Designation,Phone,Qualification,Experience Years,"
        "Specialization,Working Hours Per Week,Time Preferences,Subjects Can Teach\n"
        'Dr. John Smith,FAC001,john.smith@univ.edu,CSE,Professor,9876543220,"PhD Computer Science",15,'
        '"Machine Learning;AI",20,"Morning;Afternoon","Data Structures;Algorithms;Machine Learning"\n'
        'Prof. Jane Doe,FAC002,jane.doe@univ.edu,ECE,Associate Professor,9876543221,"PhD Electronics",12,'
        '"Signal Processing",18,"Morning","Digital Signal Processing;Communication Systems"'
    ),
    "courses": (
        "Course Code,Title,Department Code,Semester,Credits,Hours Per Week,Course Type,Prerequisites,Is Elective,Description\n"
        'CS101,Introduction to Programming,CSE,1,4,4,theory,,false,"Basic programming concepts using C++"\n'
        'CS201,Data Structures,CSE,3,4,4,theory,CS101,false,"Linear and non-linear data structures"\n'
        'CS301L,Data Structures Lab,CSE,3,2,3,lab,CS201,false,"Practical implementation of data structures"'
    ),
    "course_prerequisites": (
        "Course Code,Prerequisite Course Code,Is Mandatory\n"
        "CS201,CS101,true\n"
        "CS301L,CS201,true\n"
        "CS301L,CS101,false"
    ),
    "time_slots": (
        "Slot Name,Start Time,End Time,Duration Minutes,Slot Type,Is Active\n"
        "Period 1,09:00:00,10:00:00,60,lecture,true\n"
        "Period 2,10:15:00,11:15:00,60,lecture,true\n"
        "Lunch Break,12:30:00,13:30:00,60,lunch,true"
    ),
    "batches": (
        "Name,Program Code,Start Year,End Year,Current Semester\n"
        "CSE-BTECH-2024-B1,CSE-BTECH,2024,2028,1\n"
        "ECE-BTECH-2024-B1,ECE-BTECH,2024,2028,1"
    ),
    "students": (
        "Name,Student ID,Email,Program Code,Batch Name,Enrollment Year,Current Semester,Phone,"
        "Guardian Name,Guardian Phone,Address,Status\n"
        'John Doe,2024U0001,john.doe@univ.edu,CSE-BTECH,2024-2028 CSE,2024,1,9876543210,Robert Doe,'
        '9876543211,"123 Main St Delhi",active\n'
        'Jane Smith,2024U0002,jane.smith@univ.edu,ECE-BTECH,2024-2028 ECE,2024,1,9876543212,Michael Smith,'
        '9876543213,"456 Park Ave Mumbai",active'
    ),
    "student_enrollments": (
        "Student ID,Course Code,Academic Year,Semester,Enrollment Date,Status\n"
        "2024U0001,CS101,2024-25,1,2024-08-15,enrolled\n"
        "2024U0001,CS201,2024-25,1,2024-08-15,enrolled\n"
        "2024U0002,CS101,2024-25,1,2024-08-15,enrolled"
    ),
    "course_assignments": (
        "Course Code,Faculty Employee ID,Academic Year,Semester,Section,Max Students\n"
        "CS101,FAC001,2024-25,1,A,60\n"
        "CS101,FAC001,2024-25,1,B,60\n"
        "CS201,FAC002,2024-25,1,A,50"
    ),
}


def available_templates() -> list[str]:
    return list(TEMPLATES)


def get_template(entity_type: str) -> str | None:
    return TEMPLATES.get((entity_type or "").strip().lower())


def template_workbook(entity_type: str) -> bytes | None:
    """Same rows as the CSV template, as an .xlsx workbook."""
    text = get_template(entity_type)
    if text is None:
        return None

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = entity_type[:31]
    for row in csv.reader(io.StringIO(text)):
        ws.append([_cell(v) for v in row])

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def _cell(v: str):
    # Keep codes such as 2024U0001 as text; plain counts become numbers
    return int(v) if v.isdigit() and not v.startswith("0") else v
