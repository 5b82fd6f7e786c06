from django import forms


class CsvUploadForm(forms.Form):
    csvFile = forms.FileField(required=False)


class BatchRunForm(forms.Form):
    academicYear = forms.CharField(max_length=10, required=False)
    semester = forms.IntegerField(min_value=1, required=False)

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("academicYear") or cleaned.get("semester") is None:
            if not self.errors:
                raise forms.ValidationError("Academic year and semester are required")
        return cleaned

    def first_error(self) -> str:
        for errors in self.errors.values():
            if errors:
                return str(errors[0])
        return "Invalid request"
